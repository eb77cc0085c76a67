"""
Percolation analysis utilities.

Includes pooling of trial samples from chunked parallel jobs and an
independent flood-fill reference for checking the incremental grid model.
"""

import zipfile
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
import pandas as pd
from scipy import ndimage

from .stats import summarize_samples

SUMMARY_COLUMNS = ['grid_size', 'trials', 'mean', 'stddev',
                   'confidence_lo', 'confidence_hi', 'n_files']


def load_trial_samples(npz_file: Union[str, Path]) -> Optional[Tuple[int, np.ndarray]]:
    """
    Load one batch of trial samples saved by the worker.

    Returns:
        Tuple of (grid size, samples), or None if the file is missing, empty,
        unreadable or lacks the expected keys
    """
    npz_file = Path(npz_file)
    if not npz_file.exists() or npz_file.stat().st_size == 0:
        return None

    try:
        with np.load(npz_file) as data:
            if 'samples' not in data.files or 'n' not in data.files:
                return None
            samples = np.asarray(data['samples'], dtype=np.float64)
            n = int(data['n'])
    except (OSError, ValueError, zipfile.BadZipFile):
        return None

    if samples.size == 0:
        return None
    return n, samples


def combine_trial_results(
    results_dir: Union[str, Path],
    output_file: Union[str, Path],
    pattern: str = "**/*.npz",
) -> pd.DataFrame:
    """
    Pool the samples of all batches per grid size and write a summary CSV.

    Args:
        results_dir: Directory containing worker .npz files
        output_file: Path for the summary CSV
        pattern: Glob pattern for sample files under results_dir

    Returns:
        Summary DataFrame sorted by grid size (empty if nothing was found)
    """
    results_dir = Path(results_dir)
    output_file = Path(output_file)

    npz_files = sorted(results_dir.glob(pattern))
    if not npz_files:
        print(f"No sample files found in {results_dir}")
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    print(f"Found {len(npz_files)} sample files")

    pooled = {}
    n_files = {}
    failed_files = []
    for npz_file in npz_files:
        loaded = load_trial_samples(npz_file)
        if loaded is None:
            failed_files.append(npz_file)
            continue
        n, samples = loaded
        pooled.setdefault(n, []).append(samples)
        n_files[n] = n_files.get(n, 0) + 1

    if failed_files:
        print(f"Warning: Failed to load {len(failed_files)} files")

    if not pooled:
        print("No valid data to combine")
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    rows = []
    for n, chunks in pooled.items():
        summary = summarize_samples(np.concatenate(chunks))
        rows.append({'grid_size': n, **summary, 'n_files': n_files[n]})

    combined_df = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
    combined_df = combined_df.sort_values('grid_size').reset_index(drop=True)

    output_file.parent.mkdir(parents=True, exist_ok=True)
    combined_df.to_csv(output_file, index=False)

    print(f"\n=== SUMMARY ===")
    for row in combined_df.itertuples(index=False):
        print(f"n={row.grid_size:<6d} trials={row.trials:<8d} mean={row.mean:.6f} "
              f"95% CI=[{row.confidence_lo:.6f}, {row.confidence_hi:.6f}]")
    print(f"Saved to {output_file}")

    return combined_df


def reference_full_mask(open_mask: np.ndarray) -> np.ndarray:
    """
    Full sites computed from scratch by labelling 4-connected open clusters.

    Args:
        open_mask: Boolean (n, n) array of open sites, top row first

    Returns:
        Boolean (n, n) array, True where the site's cluster touches the top row
    """
    open_mask = np.asarray(open_mask, dtype=bool)
    labels, _ = ndimage.label(open_mask)
    top_labels = np.unique(labels[0][labels[0] > 0])
    return np.isin(labels, top_labels)


def reference_percolates(open_mask: np.ndarray) -> bool:
    """True if some open cluster touches both the top and bottom rows."""
    return bool(reference_full_mask(open_mask)[-1].any())

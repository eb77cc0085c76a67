"""
Trial worker for processing chunk files.

Each chunk line describes one batch of trials (see ``site_percolation.jobs``).
The worker runs the batch and saves the raw samples so batches can be pooled
later by ``analysis.combine_trial_results``.
"""

import numpy as np
from pathlib import Path
from typing import Union

from ..jobs import TrialJob, read_job_list
from .stats import run_trials, summarize_samples


def save_trial_samples(output_npz: Path, job: TrialJob, samples: np.ndarray) -> Path:
    """
    Save one batch as ``.npz`` plus a one-line ``.score`` file (mean, stddev).
    """
    summary = summarize_samples(samples)

    output_npz.parent.mkdir(parents=True, exist_ok=True)
    np.savez(output_npz, samples=samples, n=job.n, seed=job.seed)

    score_file = output_npz.with_suffix('.score')
    with open(score_file, 'w') as f:
        f.write(f"{summary['mean']}\t{summary['stddev']}\n")
    return output_npz


def process_trials_chunk(
    chunk_file: Union[str, Path],
    output_dir: Union[str, Path],
) -> int:
    """
    Run every trial batch listed in a chunk file.

    Output for job ``n20/batch_0001`` goes to ``output_dir/n20/batch_0001.npz``
    and ``.score``. Malformed lines are skipped; errors from the percolation
    model itself propagate.

    Args:
        chunk_file: Path to chunk file with one job line per batch
        output_dir: Output directory for sample files

    Returns:
        Number of batches processed
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    lines = read_job_list(chunk_file)
    print(f"Processing {len(lines)} trial jobs from chunk...")

    processed = 0
    for line in lines:
        try:
            job = TrialJob.from_line(line)
        except ValueError as e:
            print(f"  Skipping malformed job: {line} ({e})")
            continue

        rng = np.random.default_rng(job.seed)
        samples = run_trials(job.n, job.trials, rng)
        save_trial_samples(output_dir / f"{job.name}.npz", job, samples)
        print(f"  {job.name}: n={job.n} trials={job.trials} mean={samples.mean():.6f}")
        processed += 1

    print(f"Processed {processed}/{len(lines)} jobs")
    return processed

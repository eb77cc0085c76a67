"""
Job list and chunk file generation for trial batches.

Job List Format:
    One batch of trials per line, tab separated:

        name\tn\ttrials\tseed

    Example:
        n20/batch_0001\t20\t50\t2718281828

Workflow:
    1. Generate job list: site-perc jobs create-list --config run.yaml
    2. Chunk job list:    site-perc jobs chunk --job-list jobs.txt --chunks-dir chunks/
    3. Run each chunk:    site-perc run-trials --chunks-dir chunks/ --output-dir samples/
    4. Combine results:   site-perc results combine --results-dir samples/ --output summary.csv
"""

import math
from datetime import datetime
from pathlib import Path
from typing import List, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import InvalidArgument


class TrialJob(NamedTuple):
    """One line of a trial job list."""
    name: str
    n: int
    trials: int
    seed: int

    def to_line(self) -> str:
        return f"{self.name}\t{self.n}\t{self.trials}\t{self.seed}"

    @classmethod
    def from_line(cls, line: str) -> 'TrialJob':
        """
        Parse a job line.

        Raises ValueError for a wrong field count, non-integer fields or a
        non-positive grid size / trial count.
        """
        parts = line.strip().split('\t')
        if len(parts) != 4:
            raise ValueError(f"expected 4 tab-separated fields, got {len(parts)}: {line!r}")
        name, n, trials, seed = parts
        job = cls(name, int(n), int(trials), int(seed))
        if job.n <= 0 or job.trials <= 0:
            raise ValueError(f"n and trials should be > 0, got n={job.n}, trials={job.trials}")
        return job


CHUNK_GLOB = "chunk_*_of_*.txt"


def chunk_name(task_id: int, num_chunks: int) -> str:
    """File name of chunk ``task_id`` (1-indexed) out of ``num_chunks``."""
    return f"chunk_{task_id:04d}_of_{num_chunks:04d}.txt"


def read_job_list(job_list_file: Union[str, Path]) -> List[str]:
    """
    Read job lines from a file, dropping blank lines and ``#`` comments.
    """
    with open(job_list_file, 'r') as f:
        stripped = (line.strip() for line in f)
        return [line for line in stripped if line and not line.startswith('#')]


def write_job_list(jobs: List[str], output_file: Union[str, Path]) -> Path:
    """Write job lines to ``output_file``, creating parent directories."""
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(''.join(job + '\n' for job in jobs))

    print(f"Created job list with {len(jobs)} jobs: {output_file}")
    return output_file


def _batch_trials(line: str) -> Optional[int]:
    try:
        return TrialJob.from_line(line).trials
    except ValueError:
        return None


def generate_trial_jobs(
    grid_sizes: Sequence[int],
    trials: int,
    trials_per_job: int,
    seed: Optional[int] = None,
) -> List[str]:
    """
    Split the trials for each grid size into independent batches.

    Every batch gets its own seed spawned from a single SeedSequence, so the
    full run is reproducible from ``seed`` and batches never share a stream.

    Args:
        grid_sizes: Grid sizes to estimate the threshold for
        trials: Total trials per grid size
        trials_per_job: Maximum trials in one batch
        seed: Root seed (fresh entropy if None)

    Returns:
        List of job lines
    """
    if trials <= 0 or trials_per_job <= 0:
        raise InvalidArgument(
            f"trials and trials_per_job should be > 0, got {trials}, {trials_per_job}"
        )
    if any(n <= 0 for n in grid_sizes):
        raise InvalidArgument(f"grid sizes should be > 0, got {list(grid_sizes)}")
    # Batch names are derived from the grid size, so a repeat would overwrite output
    if len(set(grid_sizes)) != len(grid_sizes):
        raise InvalidArgument(f"grid sizes should be unique, got {list(grid_sizes)}")

    n_batches = math.ceil(trials / trials_per_job)
    children = np.random.SeedSequence(seed).spawn(len(grid_sizes) * n_batches)

    jobs = []
    child = iter(children)
    for n in grid_sizes:
        remaining = trials
        for i in range(n_batches):
            batch_trials = min(trials_per_job, remaining)
            remaining -= batch_trials
            batch_seed = int(next(child).generate_state(1)[0])
            jobs.append(TrialJob(f"n{n}/batch_{i + 1:04d}", n, batch_trials, batch_seed).to_line())
    return jobs


def create_chunk_files(
    job_list: List[str],
    output_dir: Union[str, Path],
    chunk_size: int = 100,
) -> Tuple[List[Path], Path]:
    """
    Split a job list into chunk files, one per array task.

    If chunk_size >= len(job_list), creates a single chunk. A
    ``chunks_summary.txt`` next to the chunks lists the job range and the
    number of trials each chunk will run.

    Args:
        job_list: List of job lines
        output_dir: Directory to save chunk files
        chunk_size: Number of jobs per chunk

    Returns:
        Tuple of (list of chunk file paths, summary file path)
    """
    if chunk_size <= 0:
        raise InvalidArgument(f"chunk_size should be > 0, got {chunk_size}")

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    total_jobs = len(job_list)
    chunk_size = min(chunk_size, max(total_jobs, 1))
    num_chunks = math.ceil(total_jobs / chunk_size)

    print(f"Creating {num_chunks} chunk(s) from {total_jobs} jobs")

    chunk_files = []
    summary_lines = []
    for task_id in range(1, num_chunks + 1):
        start = (task_id - 1) * chunk_size
        chunk_jobs = job_list[start:start + chunk_size]
        chunk_path = write_job_list(chunk_jobs, output_dir / chunk_name(task_id, num_chunks))
        chunk_files.append(chunk_path)

        trials = [_batch_trials(job) for job in chunk_jobs]
        n_malformed = trials.count(None)
        line = (f"{chunk_path.name}: jobs {start + 1}-{start + len(chunk_jobs)}, "
                f"{sum(t for t in trials if t is not None)} trials")
        if n_malformed:
            line += f", {n_malformed} malformed"
        summary_lines.append(line)

    summary_path = output_dir / "chunks_summary.txt"
    summary_path.write_text(
        f"Total jobs: {total_jobs}\n"
        f"Jobs per chunk: {chunk_size}\n"
        f"Number of chunks: {num_chunks}\n"
        f"Created: {datetime.now().isoformat()}\n"
        "\nChunk files:\n"
        + ''.join(line + '\n' for line in summary_lines)
    )

    return chunk_files, summary_path


def chunk_job_list_file(
    job_list_file: Union[str, Path],
    chunks_dir: Union[str, Path],
    chunk_size: int = 100,
) -> Tuple[int, Path]:
    """
    Read a job list file and create chunks.

    Returns:
        Tuple of (number of chunks, chunks directory path)
    """
    job_list = read_job_list(job_list_file)

    if not job_list:
        print("No jobs to process!")
        return 0, Path(chunks_dir)

    chunk_files, _ = create_chunk_files(job_list, chunks_dir, chunk_size)
    return len(chunk_files), Path(chunks_dir)


def count_chunks(chunks_dir: Union[str, Path]) -> int:
    return sum(1 for _ in Path(chunks_dir).glob(CHUNK_GLOB))


def get_chunk_file(chunks_dir: Union[str, Path], task_id: int) -> Optional[Path]:
    """
    Chunk file for array task ``task_id`` (1-indexed), or None if missing.
    """
    return next(Path(chunks_dir).glob(f"chunk_{task_id:04d}_of_*.txt"), None)

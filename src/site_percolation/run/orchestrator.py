"""
Run orchestrator - generates the trial job list and chunks from a RunConfig.

Usage:
    config = RunConfig.from_yaml('config/threshold_scan.yaml')
    n_jobs, n_chunks = prepare_run(config)
"""

from typing import Tuple

from .config import RunConfig
from ..jobs import create_chunk_files, generate_trial_jobs, write_job_list


def prepare_run(config: RunConfig) -> Tuple[int, int]:
    """
    Write ``jobs.txt`` and chunk files under the config's jobs directory.

    Returns:
        Tuple of (number of jobs, number of chunks)
    """
    jobs = generate_trial_jobs(
        grid_sizes=config.grid_sizes,
        trials=config.trials,
        trials_per_job=config.trials_per_job,
        seed=config.seed,
    )

    print(f"=== {config.run_name} ===")
    print(f"Grid sizes: {config.grid_sizes}")
    print(f"Trials per grid size: {config.trials} ({config.trials_per_job} per job)")

    write_job_list(jobs, config.jobs_dir / 'jobs.txt')
    chunk_files, _ = create_chunk_files(jobs, config.chunks_dir, config.chunk_size)

    return len(jobs), len(chunk_files)

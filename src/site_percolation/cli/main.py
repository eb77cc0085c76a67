"""
Command-line interface for site_percolation.

Batch Pattern:
    1. site-perc jobs create-list --config run.yaml
    2. site-perc jobs chunk --job-list jobs.txt --chunks-dir chunks/ --chunk-size <N>
    3. site-perc run-trials --chunks-dir chunks/ --output-dir samples/   (one per array task)
    4. site-perc results combine --config run.yaml   (or --results-dir/--output)

Interactive Commands:
    site-perc stats 200 100 --seed 42
    site-perc check 50 --fraction 0.6
"""

import os
import sys

import click
from pathlib import Path

from .. import __version__


@click.group()
@click.version_option(version=__version__)
def cli():
    """Site Percolation - percolation threshold estimation on n-by-n grids."""
    pass


# ============================================================================
# Interactive Commands
# ============================================================================

@cli.command('stats')
@click.argument('n', type=int)
@click.argument('trials', type=int)
@click.option('--seed', type=int, default=None, help='Random seed (fresh entropy if omitted)')
def stats(n, trials, seed):
    """Estimate the percolation threshold of an N-by-N grid over TRIALS trials."""
    from ..errors import InvalidArgument
    from ..percolation.stats import PercolationStats

    try:
        ps = PercolationStats(n, trials, seed=seed)
    except InvalidArgument as e:
        raise click.BadParameter(str(e))

    click.echo(f"mean                    = {ps.mean()}")
    click.echo(f"stddev                  = {ps.stddev()}")
    click.echo(f"95% confidence interval = [{ps.confidence_lo()}, {ps.confidence_hi()}]")


@cli.command('check')
@click.argument('n', type=int)
@click.option('--fraction', '-p', default=0.6, type=click.FloatRange(0.0, 1.0),
              help='Fraction of sites to open')
@click.option('--seed', type=int, default=None, help='Random seed')
def check(n, fraction, seed):
    """Open a random fraction of sites and compare against a flood fill."""
    import numpy as np
    from ..errors import InvalidArgument
    from ..percolation.grid import Percolation
    from ..percolation.analysis import reference_full_mask, reference_percolates

    try:
        perc = Percolation(n)
    except InvalidArgument as e:
        raise click.BadParameter(str(e))

    rng = np.random.default_rng(seed)
    n_open = int(round(fraction * n * n))
    for idx in rng.permutation(n * n)[:n_open]:
        perc.open(int(idx) // n + 1, int(idx) % n + 1)

    open_mask = perc.open_mask()
    full_ok = np.array_equal(perc.full_mask(), reference_full_mask(open_mask))
    perc_ok = perc.percolates() == reference_percolates(open_mask)

    click.echo(f"Opened {perc.number_of_open_sites()}/{n * n} sites, "
               f"percolates={perc.percolates()}")
    click.echo(f"Full sites match flood fill: {full_ok}")
    click.echo(f"Percolation matches flood fill: {perc_ok}")

    if not (full_ok and perc_ok):
        click.echo("ERROR: incremental model disagrees with flood fill", err=True)
        sys.exit(1)


# ============================================================================
# Jobs Commands
# ============================================================================

@cli.group()
def jobs():
    """Trial job list management commands."""
    pass


@jobs.command('create-list')
@click.option('--config', '-c', 'config_path', required=True, type=click.Path(exists=True),
              help='Run config YAML file')
def jobs_create_list(config_path):
    """Create the job list and chunk files for a run config."""
    from ..run import RunConfig, prepare_run

    config = RunConfig.from_yaml(config_path)
    n_jobs, n_chunks = prepare_run(config)

    click.echo(f"\nCreated {n_jobs} jobs in {n_chunks} chunk(s) under {config.jobs_dir}")
    click.echo(f"Run with: site-perc run-trials --chunks-dir {config.chunks_dir} "
               f"--output-dir {config.samples_dir}")
    click.echo(f"Combine with: site-perc results combine --config {config_path}")


@jobs.command('chunk')
@click.option('--job-list', '-j', required=True, type=click.Path(exists=True),
              help='Job list file to chunk')
@click.option('--chunks-dir', '-c', required=True, type=click.Path(),
              help='Directory for chunk files')
@click.option('--chunk-size', '-s', default=1, type=click.IntRange(min=1),
              help='Jobs per chunk')
def jobs_chunk(job_list, chunks_dir, chunk_size):
    """Chunk a job list file into smaller pieces for array job processing."""
    from ..jobs import chunk_job_list_file

    num_chunks, chunks_path = chunk_job_list_file(job_list, chunks_dir, chunk_size)
    click.echo(f"\nCreated {num_chunks} chunk(s) in {chunks_path}")


# ============================================================================
# Workers
# ============================================================================

@cli.command('run-trials')
@click.option('--chunk-file', '-f', type=click.Path(exists=True),
              help='Chunk file with job lines (name\\tn\\ttrials\\tseed)')
@click.option('--chunks-dir', type=click.Path(exists=True),
              help='Chunk directory, used with --task-id or $SGE_TASK_ID')
@click.option('--task-id', type=int, help='Array task ID (1-indexed)')
@click.option('--output-dir', '-o', required=True, type=click.Path(),
              help='Output directory for sample files')
def run_trials_cmd(chunk_file, chunks_dir, task_id, output_dir):
    """Worker for running the trial batches of one chunk (creates .npz and .score files)."""
    from ..jobs import get_chunk_file
    from ..percolation.worker import process_trials_chunk

    if chunk_file is None:
        if chunks_dir is None:
            raise click.UsageError("either --chunk-file or --chunks-dir is required")
        if task_id is None:
            env_task_id = os.environ.get('SGE_TASK_ID')
            if env_task_id is None or not env_task_id.isdigit():
                raise click.UsageError("--task-id required when $SGE_TASK_ID is not set")
            task_id = int(env_task_id)
        chunk_file = get_chunk_file(chunks_dir, task_id)
        if chunk_file is None:
            click.echo(f"No chunk file found for task {task_id} in {chunks_dir}", err=True)
            sys.exit(1)

    click.echo(f"Processing chunk: {chunk_file}")
    processed = process_trials_chunk(chunk_file, output_dir)
    click.echo(f"Completed {processed} trial jobs")


# ============================================================================
# Results Commands
# ============================================================================

@cli.group()
def results():
    """Result aggregation commands."""
    pass


@results.command('combine')
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True),
              help='Run config YAML (defaults for --results-dir and --output)')
@click.option('--results-dir', '-r', type=click.Path(exists=True),
              help='Directory with .npz sample files')
@click.option('--output', '-o', 'output_file', type=click.Path(),
              help='Output summary CSV')
def results_combine(config_path, results_dir, output_file):
    """Pool trial samples per grid size and write a summary CSV."""
    from ..percolation.analysis import combine_trial_results

    if config_path:
        from ..run import RunConfig
        config = RunConfig.from_yaml(config_path)
        results_dir = results_dir or config.samples_dir
        output_file = output_file or config.summary_csv
    if results_dir is None or output_file is None:
        raise click.UsageError("--results-dir and --output are required without --config")

    df = combine_trial_results(results_dir, output_file)
    if df.empty:
        click.echo("No results combined", err=True)
        sys.exit(1)
    click.echo(f"✓ Combined {int(df['n_files'].sum())} files for {len(df)} grid size(s)")


if __name__ == '__main__':
    cli()

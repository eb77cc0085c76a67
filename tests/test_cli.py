"""Tests for the command-line interface."""

import yaml
from click.testing import CliRunner

from site_percolation import __version__
from site_percolation.cli.main import cli
from site_percolation.jobs import TrialJob


class TestStatsCommand:
    """Tests for site-perc stats."""

    def test_single_site(self):
        result = CliRunner().invoke(cli, ['stats', '1', '10', '--seed', '0'])

        assert result.exit_code == 0
        assert "mean                    = 1.0" in result.output
        assert "stddev                  = 0.0" in result.output
        assert "95% confidence interval = [1.0, 1.0]" in result.output

    def test_invalid_size(self):
        result = CliRunner().invoke(cli, ['stats', '0', '10'])

        assert result.exit_code == 2

    def test_version(self):
        result = CliRunner().invoke(cli, ['--version'])

        assert __version__ in result.output


class TestCheckCommand:
    """Tests for site-perc check."""

    def test_matches_flood_fill(self):
        result = CliRunner().invoke(cli, ['check', '12', '--fraction', '0.6', '--seed', '3'])

        assert result.exit_code == 0
        assert "Full sites match flood fill: True" in result.output
        assert "Percolation matches flood fill: True" in result.output


class TestBatchCommands:
    """Tests for the create-list / run-trials / combine pipeline."""

    def test_pipeline(self, tmp_path):
        config_path = tmp_path / "run.yaml"
        config_path.write_text(yaml.safe_dump({
            "run_name": "cli_run",
            "seed": 5,
            "steps": {"trials": {"grid_sizes": [1, 3], "trials": 6, "trials_per_job": 3}},
            "output": {"base_dir": str(tmp_path / "out")},
        }))
        runner = CliRunner()

        result = runner.invoke(cli, ['jobs', 'create-list', '--config', str(config_path)])
        assert result.exit_code == 0, result.output
        chunks_dir = tmp_path / "out" / "jobs" / "chunks"
        chunk_files = sorted(chunks_dir.glob("chunk_*.txt"))
        assert len(chunk_files) == 4

        samples_dir = tmp_path / "out" / "samples"
        for task_id in range(1, 5):
            result = runner.invoke(cli, ['run-trials', '--chunks-dir', str(chunks_dir),
                                         '--task-id', str(task_id),
                                         '--output-dir', str(samples_dir)])
            assert result.exit_code == 0, result.output

        summary = tmp_path / "out" / "summary.csv"
        result = runner.invoke(cli, ['results', 'combine', '--results-dir', str(samples_dir),
                                     '--output', str(summary)])
        assert result.exit_code == 0, result.output
        assert summary.exists()
        assert "Combined 4 files for 2 grid size(s)" in result.output

    def test_run_trials_from_env(self, tmp_path):
        chunks_dir = tmp_path / "chunks"
        chunks_dir.mkdir()
        (chunks_dir / "chunk_0001_of_0001.txt").write_text(
            TrialJob("n2/batch_0001", 2, 3, 1).to_line() + "\n"
        )

        result = CliRunner().invoke(
            cli, ['run-trials', '--chunks-dir', str(chunks_dir), '--output-dir', str(tmp_path / "s")],
            env={'SGE_TASK_ID': '1'},
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "s" / "n2" / "batch_0001.npz").exists()

    def test_run_trials_requires_input(self, tmp_path):
        result = CliRunner().invoke(cli, ['run-trials', '--output-dir', str(tmp_path)])

        assert result.exit_code == 2

    def test_chunk_command(self, tmp_path):
        job_list = tmp_path / "jobs.txt"
        job_list.write_text("".join(TrialJob(f"n2/batch_{i:04d}", 2, 1, i).to_line() + "\n"
                                    for i in range(1, 4)))

        result = CliRunner().invoke(cli, ['jobs', 'chunk', '--job-list', str(job_list),
                                          '--chunks-dir', str(tmp_path / "chunks"),
                                          '--chunk-size', '2'])

        assert result.exit_code == 0, result.output
        assert len(list((tmp_path / "chunks").glob("chunk_*.txt"))) == 2


class TestCombineCommand:
    """Tests for site-perc results combine."""

    def test_defaults_from_config(self, tmp_path):
        base_dir = tmp_path / "out"
        config_path = tmp_path / "run.yaml"
        config_path.write_text(yaml.safe_dump({
            "run_name": "combine_run",
            "steps": {"trials": {"grid_sizes": [1], "trials": 2}},
            "output": {"base_dir": str(base_dir), "summary_csv": "thresholds.csv"},
        }))
        chunk = tmp_path / "chunk.txt"
        chunk.write_text(TrialJob("n1/batch_0001", 1, 2, 1).to_line() + "\n")
        runner = CliRunner()
        runner.invoke(cli, ['run-trials', '--chunk-file', str(chunk),
                            '--output-dir', str(base_dir / "samples")])

        result = runner.invoke(cli, ['results', 'combine', '--config', str(config_path)])

        assert result.exit_code == 0, result.output
        assert (base_dir / "thresholds.csv").exists()

    def test_requires_paths_without_config(self):
        result = CliRunner().invoke(cli, ['results', 'combine'])

        assert result.exit_code == 2

"""Tests for job list and chunk generation."""

import pytest

from site_percolation.errors import InvalidArgument
from site_percolation.jobs import (
    TrialJob, chunk_job_list_file, count_chunks, create_chunk_files,
    generate_trial_jobs, get_chunk_file, read_job_list, write_job_list
)


class TestGenerateTrialJobs:
    """Tests for splitting trials into batches."""

    def test_batches_cover_all_trials(self):
        jobs = [TrialJob.from_line(line) for line in generate_trial_jobs([10, 20], 120, 50, seed=1)]

        assert [job.name for job in jobs] == [
            'n10/batch_0001', 'n10/batch_0002', 'n10/batch_0003',
            'n20/batch_0001', 'n20/batch_0002', 'n20/batch_0003',
        ]
        assert [job.trials for job in jobs] == [50, 50, 20, 50, 50, 20]
        assert [job.n for job in jobs] == [10, 10, 10, 20, 20, 20]

    def test_seeds_are_reproducible_and_distinct(self):
        first = generate_trial_jobs([10, 20], 100, 25, seed=99)
        second = generate_trial_jobs([10, 20], 100, 25, seed=99)
        seeds = [TrialJob.from_line(line).seed for line in first]

        assert first == second
        assert len(set(seeds)) == len(seeds)

    def test_single_batch(self):
        jobs = generate_trial_jobs([5], 10, 100, seed=0)

        assert len(jobs) == 1
        assert TrialJob.from_line(jobs[0]).trials == 10

    @pytest.mark.parametrize("sizes,trials,per_job", [([0], 10, 5), ([5], 0, 5), ([5], 10, 0)])
    def test_invalid(self, sizes, trials, per_job):
        with pytest.raises(InvalidArgument):
            generate_trial_jobs(sizes, trials, per_job)


class TestTrialJob:
    """Tests for job line parsing."""

    def test_round_trip(self):
        job = TrialJob('n4/batch_0001', 4, 10, 123)

        assert TrialJob.from_line(job.to_line()) == job

    def test_malformed(self):
        with pytest.raises(ValueError):
            TrialJob.from_line("n4/batch_0001\t4\t10")
        with pytest.raises(ValueError):
            TrialJob.from_line("n4/batch_0001\tfour\t10\t1")


class TestJobFiles:
    """Tests for job list and chunk files."""

    def test_read_skips_comments_and_blanks(self, tmp_path):
        job_file = tmp_path / "jobs.txt"
        job_file.write_text("# header\n\na\t1\t1\t1\n  \nb\t1\t1\t2\n")

        assert read_job_list(job_file) == ["a\t1\t1\t1", "b\t1\t1\t2"]

    def test_write_then_read(self, tmp_path):
        jobs = generate_trial_jobs([3], 10, 4, seed=0)
        path = write_job_list(jobs, tmp_path / "nested" / "jobs.txt")

        assert path.exists()
        assert read_job_list(path) == jobs

    def test_create_chunk_files(self, tmp_path):
        jobs = [f"job{i}\t2\t1\t{i}" for i in range(5)]
        chunk_files, summary = create_chunk_files(jobs, tmp_path / "chunks", chunk_size=2)

        assert [p.name for p in chunk_files] == [
            'chunk_0001_of_0003.txt', 'chunk_0002_of_0003.txt', 'chunk_0003_of_0003.txt'
        ]
        assert read_job_list(chunk_files[2]) == ["job4\t2\t1\t4"]
        assert "Number of chunks: 3" in summary.read_text()
        assert count_chunks(tmp_path / "chunks") == 3
        assert get_chunk_file(tmp_path / "chunks", 2) == chunk_files[1]
        assert get_chunk_file(tmp_path / "chunks", 4) is None

    def test_large_chunk_size_makes_single_chunk(self, tmp_path):
        jobs = [f"job{i}\t2\t1\t{i}" for i in range(3)]
        chunk_files, _ = create_chunk_files(jobs, tmp_path, chunk_size=1000)

        assert len(chunk_files) == 1
        assert len(read_job_list(chunk_files[0])) == 3

    def test_chunk_empty_job_list(self, tmp_path):
        job_file = tmp_path / "jobs.txt"
        job_file.write_text("")

        num_chunks, _ = chunk_job_list_file(job_file, tmp_path / "chunks")

        assert num_chunks == 0


class TestInvalidJobs:
    """Tests for rejecting job lists that would lose or crash batches."""

    def test_duplicate_grid_sizes(self):
        with pytest.raises(InvalidArgument, match="unique"):
            generate_trial_jobs([3, 5, 3], 2, 1, seed=0)

    @pytest.mark.parametrize("line", [
        "n3/batch_0001\t3\t0\t1",
        "n3/batch_0001\t3\t-2\t1",
        "n0/batch_0001\t0\t5\t1",
    ])
    def test_non_positive_fields(self, line):
        with pytest.raises(ValueError):
            TrialJob.from_line(line)

    def test_summary_lists_trials_per_chunk(self, tmp_path):
        jobs = generate_trial_jobs([4], 7, 3, seed=0) + ["garbage"]
        _, summary = create_chunk_files(jobs, tmp_path, chunk_size=2)

        text = summary.read_text()
        assert "chunk_0001_of_0002.txt: jobs 1-2, 6 trials" in text
        assert "chunk_0002_of_0002.txt: jobs 3-4, 1 trials, 1 malformed" in text

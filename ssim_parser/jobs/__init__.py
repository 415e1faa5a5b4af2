"""Batch job orchestration."""

from ssim_parser.jobs.runner import JobResult, RunConfig, run_job

__all__ = ["JobResult", "RunConfig", "run_job"]

"""Run configuration and job preparation."""

from .config import RunConfig
from .orchestrator import prepare_run

__all__ = ['RunConfig', 'prepare_run']

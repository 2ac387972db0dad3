"""Process execution helpers."""

from .process import ProcessError, run, run_silent, run_tee

__all__ = ["ProcessError", "run", "run_silent", "run_tee"]

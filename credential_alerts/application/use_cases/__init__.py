"""Application use cases."""

from .run_expiry_check import RunExpiryCheck, RunResult

__all__ = ["RunExpiryCheck", "RunResult"]

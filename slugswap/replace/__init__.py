from .engine import ReplaceEngine, validate_job

__all__ = [
    "ReplaceEngine",
    "validate_job",
]

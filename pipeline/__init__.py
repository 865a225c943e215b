"""
Pipeline package -- offline record preparation.

Re-exports key entry points so callers can do::

    from pipeline import join_record_files, StepReport
"""

from pipeline.join import JoinResult, join_record_files
from pipeline.logging import MISSING_RESOURCE, SkipRecord, StepReport

__all__ = [
    "JoinResult",
    "join_record_files",
    "MISSING_RESOURCE",
    "SkipRecord",
    "StepReport",
]

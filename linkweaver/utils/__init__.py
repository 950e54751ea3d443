"""
LinkWeaver v0.1.0

Pipeline orchestration and logging setup.
"""

from .pipeline import (
    LinkPipeline,
    PipelineResult,
    setup_logging,
    verbosity_to_level,
)

__all__ = [
    "LinkPipeline",
    "PipelineResult",
    "setup_logging",
    "verbosity_to_level",
]

"""
LinkWeaver v0.1.0

Assembly utilities: alignment record filters and link statistics.
"""

from .alignment_filters import (
    is_valid_barcode,
    extract_barcode,
    is_proper_pair_flag,
    percent_identity,
)
from .link_statistics import (
    normal_estimation,
    is_dominant,
    head_or_tail,
    check_significance,
)

__all__ = [
    "is_valid_barcode",
    "extract_barcode",
    "is_proper_pair_flag",
    "percent_identity",
    "normal_estimation",
    "is_dominant",
    "head_or_tail",
    "check_significance",
]

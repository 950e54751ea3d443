#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
LinkWeaver v0.1.0

Link Statistics: normal approximation to the binomial used to decide
whether one count dominates another.

The same primitive backs two decisions:
1. Head/tail assignment of a scaffold under one barcode
2. Orientation dominance of a candidate scaffold link

Author: LinkWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import math
from typing import Tuple


def normal_estimation(x: int, p: float, n: int) -> float:
    """
    Normal approximation to the binomial CDF at `x` for `n` trials.

    Args:
        x: Number of successes
        p: Success probability under the null model
        n: Number of trials

    Returns:
        Approximate P(X <= x). With zero variance the CDF is a step at the
        mean; x exactly at the mean yields NaN, which never passes a
        significance comparison.
    """
    mean = n * p
    sd = math.sqrt(n * p * (1 - p))
    if sd == 0:
        if x > mean:
            return 1.0
        if x < mean:
            return 0.0
        return math.nan
    return 0.5 * (1 + math.erf((x - mean) / (sd * math.sqrt(2))))


def is_dominant(winner: int, population: int, max_error: float) -> bool:
    """
    Test whether `winner` is improbably large out of `population` under p=0.5.

    Args:
        winner: Count of the leading outcome
        population: Number of trials the leading count is compared against
        max_error: Maximum acceptable upper-tail probability

    Returns:
        True when 1 - CDF(winner) < max_error
    """
    return 1 - normal_estimation(winner, 0.5, population) < max_error


def head_or_tail(
    head: int,
    tail: int,
    min_reads: int,
    max_error: float
) -> Tuple[bool, bool]:
    """
    Decide whether read pairs favour the head or the tail of a scaffold.

    Args:
        head: Read pairs landing in the head region
        tail: Read pairs landing in the tail region
        min_reads: Minimum head + tail before any call is made
        max_error: Maximum p-value for a call

    Returns:
        (is_significant, is_head). (False, False) when there is too little
        evidence or no significant bias.
    """
    total = head + tail
    if total < min_reads:
        return False, False

    best = max(head, tail)
    if is_dominant(best, total, max_error):
        return True, best == head
    return False, False


def check_significance(
    max_count: int,
    second_count: int,
    min_links: int,
    max_error: float
) -> bool:
    """
    Decide whether the leading link orientation beats its runner-up.

    The runner-up count stands in for the number of trials, so this is a
    margin test rather than a binomial test over all links.

    Args:
        max_count: Count of the best-supported orientation
        second_count: Next-highest orientation count
        min_links: Minimum links required for any edge
        max_error: Maximum p-value for the call

    Returns:
        True if an edge should be created
    """
    if max_count < min_links:
        return False
    return is_dominant(max_count, second_count, max_error)


__all__ = [
    'normal_estimation',
    'is_dominant',
    'head_or_tail',
    'check_significance',
]

# LinkWeaver v0.1.0
# Any usage is subject to this software's license.

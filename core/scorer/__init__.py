#!/usr/bin/env python3
"""
Scoring Module - couple compatibility.

Public API:
- calculate_compatibility: 0-100 score for two wedding profiles
- score_breakdown: per-component points
- estimate_savings: savings estimate from shared vendor categories
- WeddingProfile / CompatibilityBreakdown: data structures

- models.py: Data structures
- compatibility.py: Scoring formulas
"""

from core.scorer.models import WeddingProfile, CompatibilityBreakdown
from core.scorer.compatibility import (
    calculate_compatibility,
    score_breakdown,
    estimate_savings,
    shared_vendor_categories,
)

__all__ = [
    'WeddingProfile',
    'CompatibilityBreakdown',
    'calculate_compatibility',
    'score_breakdown',
    'estimate_savings',
    'shared_vendor_categories',
]

#!/usr/bin/env python3
"""
Compatibility Scoring - heuristic 0-100 similarity between two couples.

Score is a weighted sum of four components, each floored at zero:
- Date proximity (40): loses 10 points per 30 days between the weddings
- Location (30): exact match, substring match, or same trailing region
- Budget similarity (20): relative budget difference against the average
- Shared vendor categories (10): 2 points per shared category, capped

The component maxima sum to 100 so no normalisation is needed.
"""

import math
import logging
from datetime import date
from typing import Iterable, List, Optional

from core.config_loader import CompatibilityWeights, MatchingConfig
from core.scorer.models import CompatibilityBreakdown, WeddingProfile

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (Python's round() is banker's rounding)."""
    return int(math.floor(value + 0.5))


def shared_vendor_categories(first: Iterable[str], second: Iterable[str]) -> List[str]:
    """Categories present in both lists, in the order of the first list, without duplicates."""
    others = set(second or [])
    shared = []
    for category in first or []:
        if category in others and category not in shared:
            shared.append(category)
    return shared


def date_score(date1: date, date2: date, weights: CompatibilityWeights) -> float:
    days_between = abs((date1 - date2).days)
    score = weights.date - (days_between / weights.date_decay_days) * weights.date_decay_points
    return max(0.0, score)


def _region(location: str) -> Optional[str]:
    """Last comma-delimited segment, treated as state/region."""
    return location.split(',')[-1].strip()


def location_score(location1: str, location2: str, weights: CompatibilityWeights) -> float:
    """Full location weight for an exact match, two thirds for a substring match, one third for the same region."""
    loc1 = (location1 or '').strip().lower()
    loc2 = (location2 or '').strip().lower()

    if loc1 == loc2:
        return weights.location
    if loc1 in loc2 or loc2 in loc1:
        return weights.location * 2 / 3
    if _region(loc1) == _region(loc2):
        return weights.location / 3
    return 0.0


def budget_score(budget1: int, budget2: int, weights: CompatibilityWeights) -> float:
    """
    Budget similarity.

    Budgets are validated to be at least 1,000 so the average is never zero.
    """
    average = (budget1 + budget2) / 2
    if average <= 0:
        logger.warning(f"Non-positive budgets ({budget1}, {budget2}), budget score is 0")
        return 0.0
    score = weights.budget - (abs(budget1 - budget2) / average) * weights.budget
    return max(0.0, score)


def category_score(shared_count: int, weights: CompatibilityWeights) -> float:
    return min(weights.categories, weights.points_per_shared_category * shared_count)


def score_breakdown(
    profile1: WeddingProfile,
    profile2: WeddingProfile,
    weights: Optional[CompatibilityWeights] = None
) -> CompatibilityBreakdown:
    """
    Calculate every compatibility component for two profiles.

    Args:
        profile1: First couple's wedding profile
        profile2: Second couple's wedding profile
        weights: Component weights (defaults to 40/30/20/10)

    Returns:
        CompatibilityBreakdown with per-component points and the final score
    """
    weights = weights or CompatibilityWeights()
    shared = shared_vendor_categories(profile1.vendor_categories, profile2.vendor_categories)

    breakdown = CompatibilityBreakdown(
        date_score=date_score(profile1.wedding_date, profile2.wedding_date, weights),
        location_score=location_score(profile1.wedding_location, profile2.wedding_location, weights),
        budget_score=budget_score(profile1.estimated_budget, profile2.estimated_budget, weights),
        category_score=category_score(len(shared), weights),
        shared_categories=shared,
    )
    total = (
        breakdown.date_score
        + breakdown.location_score
        + breakdown.budget_score
        + breakdown.category_score
    )
    breakdown.score = max(0, min(100, round_half_up(total)))
    return breakdown


def calculate_compatibility(
    profile1: WeddingProfile,
    profile2: WeddingProfile,
    weights: Optional[CompatibilityWeights] = None
) -> int:
    """Compatibility score in [0, 100]. Deterministic, no side effects."""
    return score_breakdown(profile1, profile2, weights).score


def estimate_savings(budget: int, shared_count: int, config: Optional[MatchingConfig] = None) -> int:
    """
    Rough savings from splitting vendors.

    Formula: round(budget * min(30, 10 + 3 * shared) / 100)
    """
    config = config or MatchingConfig()
    pct = min(
        config.savings_max_pct,
        config.savings_base_pct + config.savings_per_category_pct * shared_count
    )
    return round_half_up(budget * pct / 100)

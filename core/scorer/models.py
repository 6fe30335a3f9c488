#!/usr/bin/env python3
"""
Scoring Models - Data structures for compatibility scoring.
"""

from typing import List, Any
from dataclasses import dataclass, field
from datetime import date


@dataclass
class WeddingProfile:
    """The wedding attributes compatibility is computed from."""
    wedding_date: date
    wedding_location: str
    estimated_budget: int
    vendor_categories: List[str] = field(default_factory=list)

    @classmethod
    def from_user(cls, user: Any) -> 'WeddingProfile':
        return cls(
            wedding_date=user.wedding_date,
            wedding_location=user.wedding_location or '',
            estimated_budget=user.estimated_budget or 0,
            vendor_categories=list(user.vendor_categories or []),
        )


@dataclass
class CompatibilityBreakdown:
    """Per-component compatibility points."""
    date_score: float = 0.0
    location_score: float = 0.0
    budget_score: float = 0.0
    category_score: float = 0.0
    shared_categories: List[str] = field(default_factory=list)
    score: int = 0

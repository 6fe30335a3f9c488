#!/usr/bin/env python3
"""
Unit tests for couple compatibility scoring and savings estimates.
"""

import random
import unittest
from datetime import date, timedelta

from core.config_loader import CompatibilityWeights, MatchingConfig
from core.scorer import (
    WeddingProfile,
    calculate_compatibility,
    score_breakdown,
    estimate_savings,
    shared_vendor_categories
)
from core.scorer.compatibility import (
    round_half_up,
    date_score,
    location_score,
    budget_score,
    category_score
)

ALL_CATEGORIES = [
    'PHOTOGRAPHER', 'VIDEOGRAPHER', 'VENUE', 'CATERING', 'FLOWERS',
    'MUSIC_DJ', 'TRANSPORTATION', 'DECORATIONS', 'WEDDING_PLANNER',
    'MAKEUP_HAIR', 'CAKE', 'INVITATIONS', 'RENTALS', 'OTHER'
]


def _profile(**overrides) -> WeddingProfile:
    fields = dict(
        wedding_date=date(2027, 6, 12),
        wedding_location="Austin, TX",
        estimated_budget=20000,
        vendor_categories=['PHOTOGRAPHER', 'VENUE', 'CATERING', 'FLOWERS', 'CAKE'],
    )
    fields.update(overrides)
    return WeddingProfile(**fields)


class TestComponentScores(unittest.TestCase):

    def setUp(self):
        self.weights = CompatibilityWeights()

    def test_date_score_decays_ten_points_per_thirty_days(self):
        d = date(2027, 6, 12)
        self.assertEqual(date_score(d, d, self.weights), 40)
        self.assertEqual(date_score(d, d + timedelta(days=60), self.weights), 20)
        self.assertEqual(date_score(d + timedelta(days=60), d, self.weights), 20)

    def test_date_score_floors_at_zero(self):
        d = date(2027, 6, 12)
        self.assertEqual(date_score(d, d + timedelta(days=120), self.weights), 0)
        self.assertEqual(date_score(d, d + timedelta(days=130), self.weights), 0)
        self.assertEqual(date_score(d, d + timedelta(days=900), self.weights), 0)

    def test_location_exact_match_ignores_case_and_whitespace(self):
        self.assertEqual(location_score("Austin, TX", "  austin, tx ", self.weights), 30)

    def test_location_substring_match(self):
        self.assertEqual(location_score("Austin", "Austin, TX", self.weights), 20)
        self.assertEqual(location_score("Austin, TX", "austin", self.weights), 20)

    def test_location_same_region(self):
        self.assertEqual(location_score("Dallas, TX", "Austin, TX", self.weights), 10)

    def test_location_no_match(self):
        self.assertEqual(location_score("Dallas, TX", "Portland, OR", self.weights), 0)
        self.assertEqual(location_score("Dallas", "Portland", self.weights), 0)

    def test_location_points_scale_with_location_weight(self):
        weights = CompatibilityWeights(location=15.0)
        self.assertEqual(location_score("Austin, TX", "austin, tx", weights), 15)
        self.assertAlmostEqual(location_score("Austin", "Austin, TX", weights), 10)
        self.assertAlmostEqual(location_score("Dallas, TX", "Austin, TX", weights), 5)

    def test_location_points_never_exceed_location_weight(self):
        weights = CompatibilityWeights(location=6.0)
        for other in ("Austin, TX", "Austin", "Dallas, TX", "Portland, OR"):
            self.assertLessEqual(location_score("Austin, TX", other, weights), weights.location)

    def test_budget_score(self):
        self.assertEqual(budget_score(20000, 20000, self.weights), 20)
        # diff 10k over avg 25k -> 20 - 0.4 * 20
        self.assertAlmostEqual(budget_score(20000, 30000, self.weights), 12.0)
        self.assertEqual(budget_score(10000, 30000, self.weights), 0)
        self.assertEqual(budget_score(1000, 100000, self.weights), 0)

    def test_budget_score_zero_budgets_do_not_raise(self):
        self.assertEqual(budget_score(0, 0, self.weights), 0)

    def test_category_score_caps_at_weight(self):
        self.assertEqual(category_score(0, self.weights), 0)
        self.assertEqual(category_score(3, self.weights), 6)
        self.assertEqual(category_score(5, self.weights), 10)
        self.assertEqual(category_score(7, self.weights), 10)


class TestCalculateCompatibility(unittest.TestCase):

    def test_identical_profiles_score_100(self):
        self.assertEqual(calculate_compatibility(_profile(), _profile()), 100)

    def test_far_apart_dates_contribute_nothing(self):
        p1 = _profile()
        p2 = _profile(wedding_date=p1.wedding_date + timedelta(days=130))

        breakdown = score_breakdown(p1, p2)

        self.assertEqual(breakdown.date_score, 0)
        self.assertEqual(breakdown.score, 60)

    def test_breakdown_components(self):
        p1 = _profile(wedding_location="Dallas, TX", vendor_categories=['VENUE', 'CAKE'])
        p2 = _profile(
            wedding_date=date(2027, 7, 12),
            estimated_budget=30000,
            vendor_categories=['CAKE', 'VENUE', 'FLOWERS']
        )

        breakdown = score_breakdown(p1, p2)

        self.assertEqual(breakdown.date_score, 30)
        self.assertEqual(breakdown.location_score, 10)
        self.assertAlmostEqual(breakdown.budget_score, 12.0)
        self.assertEqual(breakdown.category_score, 4)
        self.assertEqual(breakdown.shared_categories, ['VENUE', 'CAKE'])
        self.assertEqual(breakdown.score, 56)

    def test_result_is_rounded_int(self):
        p1 = _profile()
        # 10 days apart: 40 - 10/3 = 36.67
        p2 = _profile(wedding_date=p1.wedding_date + timedelta(days=10))

        score = calculate_compatibility(p1, p2)

        self.assertIsInstance(score, int)
        self.assertEqual(score, 97)

    def test_score_always_in_range(self):
        rng = random.Random(42)
        base = date(2027, 1, 1)
        locations = ["Austin, TX", "Dallas, TX", "Austin", "Portland, OR", "Bend, OR", "Paris"]

        for _ in range(300):
            p1 = _profile(
                wedding_date=base + timedelta(days=rng.randint(0, 1000)),
                wedding_location=rng.choice(locations),
                estimated_budget=rng.randint(1000, 1_000_000),
                vendor_categories=rng.sample(ALL_CATEGORIES, rng.randint(0, 14)),
            )
            p2 = _profile(
                wedding_date=base + timedelta(days=rng.randint(0, 1000)),
                wedding_location=rng.choice(locations),
                estimated_budget=rng.randint(1000, 1_000_000),
                vendor_categories=rng.sample(ALL_CATEGORIES, rng.randint(0, 14)),
            )

            score = calculate_compatibility(p1, p2)

            self.assertIsInstance(score, int)
            self.assertGreaterEqual(score, 0)
            self.assertLessEqual(score, 100)

    def test_custom_weights(self):
        weights = CompatibilityWeights(date=0, location=0, budget=0, categories=0)
        self.assertEqual(calculate_compatibility(_profile(), _profile(), weights), 0)


class TestSharedCategoriesAndSavings(unittest.TestCase):

    def test_shared_categories_keep_first_list_order_without_duplicates(self):
        shared = shared_vendor_categories(['VENUE', 'CAKE', 'VENUE', 'DJ'], ['CAKE', 'VENUE'])
        self.assertEqual(shared, ['VENUE', 'CAKE'])

    def test_shared_categories_handles_empty(self):
        self.assertEqual(shared_vendor_categories([], ['CAKE']), [])
        self.assertEqual(shared_vendor_categories(None, None), [])

    def test_savings_example(self):
        self.assertEqual(estimate_savings(20000, 2), 3200)

    def test_savings_base_and_cap(self):
        self.assertEqual(estimate_savings(20000, 0), 2000)
        self.assertEqual(estimate_savings(20000, 10), 6000)

    def test_savings_rounds_half_up(self):
        # 1025 * 10% = 102.5
        self.assertEqual(estimate_savings(1025, 0), 103)

    def test_savings_uses_config(self):
        config = MatchingConfig(savings_base_pct=5, savings_per_category_pct=5, savings_max_pct=15)
        self.assertEqual(estimate_savings(10000, 1, config), 1000)
        self.assertEqual(estimate_savings(10000, 4, config), 1500)

    def test_round_half_up(self):
        self.assertEqual(round_half_up(0.5), 1)
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(84.4), 84)
        self.assertEqual(round_half_up(0), 0)


if __name__ == '__main__':
    unittest.main()

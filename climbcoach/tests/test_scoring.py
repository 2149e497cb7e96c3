"""Tests for scoring — normalization, composite score, grade ladder, area analysis."""

import math
import unittest

from climbcoach.engine.scoring import (
    AREAS,
    BOULDER_TO_LEAD,
    DEFAULT_WEIGHTS,
    GRADE_BUCKETS,
    WEIGHT_PROFILES,
    analyze_areas,
    grade_bucket,
    grade_for_score,
    lead_grade_for,
    normalize,
    predict_grade,
    score,
    to_number,
    weights_for,
)


def _make_record(
    *,
    weight=70,
    height=175,
    finger=35,
    pull_ups=10,
    push_ups=15,
    toe_to_bar=5,
    leg_spread=150,
):
    return {
        "assessment_date": "2024-03-01",
        "boulder_grade": "V6",
        "personal_info": {"weight": weight, "height": height},
        "finger_strength_weight": finger,
        "pull_ups": pull_ups,
        "push_ups": push_ups,
        "toe_to_bar": toe_to_bar,
        "leg_spread": leg_spread,
    }


class TestToNumber(unittest.TestCase):
    def test_numbers_pass_through(self):
        self.assertEqual(to_number(12), 12.0)
        self.assertEqual(to_number(1.5), 1.5)

    def test_strings_with_units(self):
        self.assertEqual(to_number("1.40 m"), 1.4)
        self.assertEqual(to_number("165"), 165.0)

    def test_garbage_is_none(self):
        for value in (None, "", "n/a", True, [], {}, float("nan"), float("inf")):
            self.assertIsNone(to_number(value), value)


class TestNormalize(unittest.TestCase):
    def test_reference_example(self):
        v = normalize(_make_record())
        self.assertAlmostEqual(v["finger_strength"], 1.5)
        self.assertAlmostEqual(v["pull_ups"], 10 / 70)
        self.assertAlmostEqual(v["push_ups"], 15 / 70)
        self.assertAlmostEqual(v["core_strength"], 5 / 70)
        self.assertAlmostEqual(v["flexibility"], 150 / 175)

    def test_keys_in_area_order(self):
        self.assertEqual(list(normalize(_make_record())), AREAS)

    def test_empty_record(self):
        v = normalize({})
        self.assertEqual(v["finger_strength"], 1.0)
        for area in AREAS[1:]:
            self.assertEqual(v[area], 0.0)

    def test_none_record(self):
        self.assertEqual(normalize(None), normalize({}))

    def test_missing_or_bad_body_weight_uses_fallback(self):
        for weight in (None, 0, -5, "heavy"):
            v = normalize(_make_record(weight=weight, finger=35))
            self.assertAlmostEqual(v["finger_strength"], 1.5)
            self.assertAlmostEqual(v["pull_ups"], 10 / 70)
            for value in v.values():
                self.assertTrue(math.isfinite(value))
                self.assertGreaterEqual(value, 0.0)

    def test_missing_height_uses_fallback(self):
        v = normalize(_make_record(height=None, leg_spread=170))
        self.assertAlmostEqual(v["flexibility"], 1.0)

    def test_non_numeric_metrics_are_zero(self):
        v = normalize(_make_record(pull_ups="lots", push_ups=None, toe_to_bar="", finger=None))
        self.assertEqual(v["pull_ups"], 0.0)
        self.assertEqual(v["push_ups"], 0.0)
        self.assertEqual(v["core_strength"], 0.0)
        self.assertEqual(v["finger_strength"], 1.0)

    def test_negative_inputs_clamp_to_zero(self):
        v = normalize(_make_record(finger=-200, pull_ups=-3))
        self.assertEqual(v["finger_strength"], 1.0)
        self.assertEqual(v["pull_ups"], 0.0)

    def test_negative_added_weight_reads_as_bodyweight_hang(self):
        v = normalize({"finger_strength_weight": -35, "personal_info": {"weight": 70}})
        self.assertEqual(v["finger_strength"], 1.0)

    def test_leg_spread_text_value(self):
        v = normalize(_make_record(leg_spread="140 cm", height=175))
        self.assertAlmostEqual(v["flexibility"], 140 / 175)


class TestScore(unittest.TestCase):
    def test_weight_profiles_sum_to_one(self):
        for name, weights in WEIGHT_PROFILES.items():
            self.assertAlmostEqual(sum(weights.values()), 1.0, msg=name)
            self.assertEqual(set(weights), set(AREAS))

    def test_reference_composite_default_profile(self):
        composite = score(normalize(_make_record()))
        expected = 0.45 * 1.5 + 0.15 * (10 / 70) + 0.10 * (15 / 70) + 0.20 * (5 / 70) + 0.10 * (150 / 175)
        self.assertAlmostEqual(composite, expected)
        self.assertAlmostEqual(composite, 0.8179, places=4)

    def test_reference_composite_v1_profile(self):
        composite = score(normalize(_make_record()), weights_for("v1"))
        self.assertAlmostEqual(composite, 0.8214, places=4)

    def test_deterministic(self):
        record = _make_record()
        self.assertEqual(score(normalize(record)), score(normalize(dict(record))))

    def test_default_weights(self):
        self.assertIs(weights_for(None), DEFAULT_WEIGHTS)

    def test_unknown_profile_raises(self):
        with self.assertRaises(ValueError):
            weights_for("v9")

    def test_non_negative(self):
        self.assertGreaterEqual(score(normalize({})), 0.0)


class TestGradeLadder(unittest.TestCase):
    def test_boundaries(self):
        self.assertEqual(grade_for_score(1.45), "V12")
        self.assertEqual(grade_for_score(0.65), "V5")
        self.assertEqual(grade_for_score(0.649999), "V4")
        self.assertEqual(grade_for_score(0.85), "V7")
        self.assertEqual(grade_for_score(1.4499), "V11")

    def test_no_lower_bound(self):
        self.assertEqual(grade_for_score(0.0), "V4")
        self.assertEqual(grade_for_score(-3.0), "V4")

    def test_no_upper_bound(self):
        self.assertEqual(grade_for_score(10.0), "V12")

    def test_monotonic(self):
        scores = [i / 100 for i in range(0, 200)]
        buckets = [grade_bucket(grade_for_score(s)) for s in scores]
        self.assertEqual(buckets, sorted(buckets))
        self.assertEqual(len(set(buckets)), len(GRADE_BUCKETS))

    def test_grade_bucket_unknown_raises(self):
        with self.assertRaises(ValueError):
            grade_bucket("V3")

    def test_lead_table(self):
        self.assertEqual(len(BOULDER_TO_LEAD), 14)
        self.assertEqual(lead_grade_for("V7"), "7b+")
        self.assertIsNone(lead_grade_for("V14"))
        self.assertIsNone(lead_grade_for(None))


class TestAreaAnalysis(unittest.TestCase):
    def test_reference_ranking(self):
        areas = analyze_areas(normalize(_make_record()))
        self.assertEqual(areas["strongest_area"], "finger_strength")
        self.assertEqual(areas["weakest_area"], "core_strength")
        self.assertEqual(areas["secondary_area"], "pull_ups")
        self.assertEqual(
            areas["ranking"],
            ["finger_strength", "flexibility", "push_ups", "pull_ups", "core_strength"],
        )

    def test_ranks_raw_not_weighted_values(self):
        # Flexibility carries a small weight but the largest raw value.
        vector = {"finger_strength": 1.0, "pull_ups": 0.1, "push_ups": 0.1, "core_strength": 0.1, "flexibility": 1.2}
        self.assertEqual(analyze_areas(vector)["strongest_area"], "flexibility")

    def test_ties_pick_first_listed_area(self):
        vector = {a: 0.5 for a in AREAS}
        areas = analyze_areas(vector)
        self.assertEqual(areas["strongest_area"], "finger_strength")
        self.assertEqual(areas["weakest_area"], "finger_strength")
        self.assertEqual(areas["secondary_area"], "pull_ups")

    def test_empty_record_weakest_is_first_zero_area(self):
        areas = analyze_areas(normalize({}))
        self.assertEqual(areas["strongest_area"], "finger_strength")
        self.assertEqual(areas["weakest_area"], "pull_ups")
        self.assertEqual(areas["secondary_area"], "push_ups")

    def test_recommendations_follow_weak_areas(self):
        areas = analyze_areas(normalize(_make_record()))
        self.assertIn("Toe to bar", areas["recommendations"]["primary"]["exercises"])
        self.assertIn("pull-ups", areas["recommendations"]["secondary"]["exercises"])


class TestPredictGrade(unittest.TestCase):
    def test_reference_prediction(self):
        result = predict_grade(_make_record())
        # 0.818 sits in the [0.75, 0.85) bucket.
        self.assertEqual(result["predicted_grade"], "V6")
        self.assertEqual(result["lead_grade"], "7a+")
        self.assertEqual(result["confidence"], "Medium")
        self.assertEqual(result["strongest_area"], "finger_strength")
        self.assertEqual(result["weakest_area"], "core_strength")
        self.assertEqual(set(result["recommendations"]), {"primary", "secondary"})

    def test_strong_athlete(self):
        result = predict_grade(_make_record(finger=100, pull_ups=25, toe_to_bar=20, leg_spread=180))
        self.assertEqual(result["predicted_grade"], "V11")

    def test_none_record(self):
        self.assertIsNone(predict_grade(None))

    def test_empty_record(self):
        result = predict_grade({})
        self.assertAlmostEqual(result["composite_score"], 0.45)
        self.assertEqual(result["predicted_grade"], "V4")

    def test_custom_weights(self):
        a = predict_grade(_make_record(), weights_for("v1"))["composite_score"]
        b = predict_grade(_make_record(), weights_for("v2"))["composite_score"]
        self.assertNotAlmostEqual(a, b)


if __name__ == "__main__":
    unittest.main()

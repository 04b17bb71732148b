"""Unit tests for correct-index position bias analysis."""

import unittest

import numpy as np

from quizbank.data.schemas import Question
from quizbank.statistical.position_bias import (
    _chi2_sf,
    analyze_position_bias,
    calculate_index_distribution,
    chi_square_test_from_scratch,
    find_over_represented,
    grouped_chi_square,
)


def _q(i, correct, n=4):
    return Question(f"Test {i}", tuple("ABCDEF"[:n]), correct_index=correct, id=f"q{i}")


class TestIndexDistribution(unittest.TestCase):
    def test_basic(self):
        questions = [_q(1, 0), _q(2, 0), _q(3, 1), _q(4, 2), _q(5, 3)]
        self.assertEqual(calculate_index_distribution(questions), {0: 2, 1: 1, 2: 1, 3: 1})

    def test_unresolved_not_counted(self):
        questions = [_q(1, None), _q(2, 1), _q(3, None)]
        self.assertEqual(calculate_index_distribution(questions), {1: 1})

    def test_empty(self):
        self.assertEqual(calculate_index_distribution([]), {})


class TestChiSquareTest(unittest.TestCase):
    def test_uniform_distribution(self):
        chi2, p, df = chi_square_test_from_scratch(np.array([25, 25, 25, 25]), np.array([25, 25, 25, 25]))
        self.assertAlmostEqual(chi2, 0.0, places=10)
        self.assertEqual(df, 3)
        self.assertGreater(p, 0.05)

    def test_biased_distribution(self):
        chi2, p, _ = chi_square_test_from_scratch(np.array([50, 10, 10, 10]), np.array([20, 20, 20, 20]))
        self.assertAlmostEqual(chi2, 60.0)
        self.assertLess(p, 0.001)

    def test_known_example(self):
        chi2, _, _ = chi_square_test_from_scratch(np.array([20, 30, 25, 25]), np.array([25, 25, 25, 25]))
        self.assertAlmostEqual(chi2, 2.0, places=10)

    def test_shape_mismatch(self):
        with self.assertRaises(ValueError):
            chi_square_test_from_scratch(np.array([10, 20, 30]), np.array([15, 25]))

    def test_zero_expected(self):
        with self.assertRaises(ValueError):
            chi_square_test_from_scratch(np.array([10, 20, 30]), np.array([0, 20, 10]))

    def test_survival_function_reference_values(self):
        # chi2(1) at 3.841 and chi2(3) at 7.815 are the usual 5% critical values
        self.assertAlmostEqual(_chi2_sf(3.841, 1), 0.05, places=3)
        self.assertAlmostEqual(_chi2_sf(7.815, 3), 0.05, places=3)
        self.assertAlmostEqual(_chi2_sf(2.0, 2), np.exp(-1.0), places=6)
        self.assertEqual(_chi2_sf(1.0, 0), 1.0)


class TestGroupedAnalysis(unittest.TestCase):
    def test_groups_by_choice_count(self):
        questions = [_q(i, i % 2, n=2) for i in range(4)] + [_q(i, i % 3, n=3) for i in range(6)]
        chi2, p, df, obs, exp = grouped_chi_square(questions)
        self.assertAlmostEqual(chi2, 0.0)
        self.assertEqual(df, 1 + 2)
        self.assertEqual(obs.tolist(), [2, 2, 2, 2, 2])
        self.assertEqual(exp.tolist(), [2, 2, 2, 2, 2])
        self.assertAlmostEqual(p, 1.0)

    def test_empty_pool(self):
        chi2, p, df, obs, _ = grouped_chi_square([])
        self.assertEqual((chi2, p, df), (0.0, 1.0, 0))
        self.assertEqual(obs.size, 0)

    def test_over_represented_index(self):
        questions = [_q(i, 0) for i in range(30)] + [_q(100 + i, i % 4) for i in range(8)]
        self.assertEqual(find_over_represented(questions), {"4": [0]})

    def test_small_groups_are_ignored(self):
        self.assertEqual(find_over_represented([_q(i, 0) for i in range(5)]), {})

    def test_report_flags_skewed_pool(self):
        questions = [_q(i, 0) for i in range(40)] + [_q(100, None)]
        report = analyze_position_bias(questions)
        self.assertTrue(report.bias_detected)
        self.assertEqual(report.dataset_info["total_questions"], 41)
        self.assertEqual(report.dataset_info["resolved_questions"], 40)
        self.assertEqual(report.index_frequencies, {"0": 40})
        self.assertGreater(report.summary_statistics["effect_size"], 0.9)

    def test_report_uniform_pool(self):
        questions = [_q(i, i % 4) for i in range(40)]
        report = analyze_position_bias(questions)
        self.assertFalse(report.bias_detected)
        self.assertEqual(report.over_represented, {})


if __name__ == "__main__":
    unittest.main()

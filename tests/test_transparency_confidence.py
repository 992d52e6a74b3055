# tests/test_transparency_confidence.py
"""
Transparency and Confidence calculator tests.
"""

import pytest

from candidate_scoring.scoring.confidence_calculator import ConfidenceCalculator
from candidate_scoring.scoring.transparency_calculator import NEUTRAL_DEFAULT, TransparencyCalculator


class TestTransparencyCalculator:

    def test_weighted_parts(self):
        result = TransparencyCalculator().calculate(90, 80, 70)
        # 31.5 -> 32, 28, 21
        assert (result.completeness, result.consistency, result.assets_quality) == (32, 28, 21)
        assert result.score == 81

    def test_full_and_empty(self):
        calculator = TransparencyCalculator()
        assert calculator.calculate(100, 100, 100).score == 100
        assert calculator.calculate(0, 0, 0).score == 0

    def test_absent_indicators_use_neutral_default(self):
        result = TransparencyCalculator().calculate(None, None, None)
        # 17.5 -> 18, 17.5 -> 18, 15
        assert NEUTRAL_DEFAULT == 50
        assert result.score == 51

    def test_absent_is_not_the_same_as_zero(self):
        calculator = TransparencyCalculator()
        assert calculator.calculate(None, 80, 80).score > calculator.calculate(0, 80, 80).score


class TestConfidenceCalculator:

    @pytest.mark.parametrize("verification, coverage, expected", [
        (0, 0, (0, 0, 0)),
        (100, 100, (50, 50, 100)),
        (80, 90, (40, 45, 85)),
        (33, 67, (17, 34, 51)),
        (1, 1, (1, 1, 2)),
    ])
    def test_parts(self, verification, coverage, expected):
        result = ConfidenceCalculator().calculate(verification, coverage)
        assert (result.verification, result.coverage, result.score) == expected

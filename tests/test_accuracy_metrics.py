"""
Tests for accuracy metric calculation and the trust gate.
"""

import pytest

from diagram_analyzer.detection import (
    AccuracyMetrics,
    DetectionResult,
    MatchType,
    calculate_accuracy_metrics,
    should_trust_detection,
)


@pytest.fixture
def make_results(catalog):
    def _make(*confidences):
        services = catalog.get_all()
        return [
            DetectionResult(services[i], c, MatchType.KEYWORD)
            for i, c in enumerate(confidences)
        ]

    return _make


class TestAccuracyMetrics:
    """Test the confidence distribution summary."""

    def test_empty_input_all_zero(self):
        """Test an empty list yields zeros rather than NaN."""
        metrics = calculate_accuracy_metrics([])

        assert metrics == AccuracyMetrics(0.0, 0, 0, 0, 0.0)

    def test_bucket_boundaries(self, make_results):
        """Test 0.9 is high, 0.7 is medium and anything lower is low."""
        metrics = calculate_accuracy_metrics(make_results(0.9, 0.89, 0.7, 0.69))

        assert metrics.high_confidence_count == 1
        assert metrics.medium_confidence_count == 2
        assert metrics.low_confidence_count == 1

    def test_weighted_score(self, make_results):
        metrics = calculate_accuracy_metrics(make_results(0.95, 0.9, 0.8, 0.7, 0.6))

        assert metrics.overall_confidence == pytest.approx(0.79)
        assert metrics.accuracy_score == pytest.approx((2 * 1.0 + 2 * 0.8 + 0.5) / 5)

    def test_all_high(self, make_results):
        metrics = calculate_accuracy_metrics(make_results(1.0, 0.9))

        assert metrics.accuracy_score == pytest.approx(1.0)

    def test_to_dict(self, make_results):
        data = calculate_accuracy_metrics(make_results(0.9)).to_dict()

        assert data == {
            "overall_confidence": 0.9,
            "high_confidence_count": 1,
            "medium_confidence_count": 0,
            "low_confidence_count": 0,
            "accuracy_score": 1.0,
        }


class TestTrustGate:
    """Test the accuracy gate used by downstream callers."""

    def test_trusted_above_gate(self, make_results):
        results = make_results(0.9, 0.9, 0.9, 0.63)
        metrics = calculate_accuracy_metrics(results)

        assert metrics.accuracy_score == pytest.approx(0.875)
        assert should_trust_detection(results, metrics) is True

    def test_gate_is_exclusive(self, make_results):
        results = make_results(0.8)
        metrics = calculate_accuracy_metrics(results)

        assert should_trust_detection(results, metrics, gate=0.8) is False

    def test_no_results_never_trusted(self):
        assert should_trust_detection([], calculate_accuracy_metrics([])) is False

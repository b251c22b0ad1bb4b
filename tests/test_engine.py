"""
Tests for the visitor risk scoring engine.
Pure computation: no store, no event loop.
"""
import pytest

from gatehouse.schemas.enums import RiskLevel
from gatehouse.schemas.risk_signals import Anomaly, RiskFactors, RiskSignals
from gatehouse.scoring.engine import (
    FACTOR_WEIGHTS,
    aggregate_confidence,
    calculate_risk_score,
    classify_risk_level,
    clamp,
    evaluate,
    is_flagged,
    level_bounds,
    should_trigger_alert,
    top_anomalies,
)


def _factors(frequency=0.0, timing=0.0, behavior=0.0, historical=0.0) -> RiskFactors:
    return RiskFactors(
        frequency_score=frequency,
        timing_score=timing,
        behavior_score=behavior,
        historical_score=historical,
    )


def _anomaly(confidence: float, severity: RiskLevel = RiskLevel.LOW, type: str = "a") -> Anomaly:
    return Anomaly(type=type, severity=severity, confidence=confidence)


class TestCompositeScore:

    def test_weights_sum_to_one(self):
        assert sum(FACTOR_WEIGHTS.values()) == pytest.approx(1.0)

    def test_weighted_sum(self):
        assert calculate_risk_score(_factors(80, 40, 90, 50)) == pytest.approx(69.0)

    def test_all_zero(self):
        assert calculate_risk_score(_factors()) == 0.0

    def test_all_max(self):
        assert calculate_risk_score(_factors(100, 100, 100, 100)) == pytest.approx(100.0)

    @pytest.mark.parametrize("values", [
        (0, 0, 0, 0), (100, 0, 0, 0), (0, 100, 100, 0), (12.5, 99.9, 0.1, 55), (100, 100, 100, 100),
    ])
    def test_within_range(self, values):
        score = calculate_risk_score(_factors(*values))
        assert 0.0 <= score <= 100.0

    def test_deterministic(self):
        factors = _factors(33.3, 66.6, 12.1, 87.4)
        first = evaluate(RiskSignals(**factors.model_dump()))
        second = evaluate(RiskSignals(**factors.model_dump()))
        assert first.risk_score == second.risk_score
        assert first.risk_level == second.risk_level

    def test_out_of_range_clamped(self):
        assert calculate_risk_score(_factors(250, -40, 100, 100)) == pytest.approx(
            calculate_risk_score(_factors(100, 0, 100, 100))
        )

    def test_nan_counts_as_zero(self):
        assert clamp(float("nan")) == 0.0
        assert calculate_risk_score(_factors(float("nan"), 0, 0, 0)) == 0.0

    def test_just_below_flag_threshold_stays_medium(self):
        score = calculate_risk_score(_factors(59.9999999, 59.9999999, 59.9999999, 59.9999999))

        assert score < 60.0
        assert classify_risk_level(score) == RiskLevel.MEDIUM
        assert not is_flagged(score)

    def test_just_below_medium_stays_low(self):
        score = calculate_risk_score(_factors(29.9999999, 29.9999999, 29.9999999, 29.9999999))
        assert classify_risk_level(score) == RiskLevel.LOW

    def test_evaluate_keeps_near_threshold_score(self):
        result = evaluate(RiskSignals(frequency_score=59.9999999, timing_score=59.9999999,
                                      behavior_score=59.9999999, historical_score=59.9999999))
        assert result.risk_score < 60.0
        assert result.risk_level == RiskLevel.MEDIUM
        assert result.should_trigger_alert is False


class TestClassification:

    @pytest.mark.parametrize("score,expected", [
        (0.0, RiskLevel.LOW),
        (29.999, RiskLevel.LOW),
        (30.0, RiskLevel.MEDIUM),
        (59.999, RiskLevel.MEDIUM),
        (60.0, RiskLevel.HIGH),
        (79.999, RiskLevel.HIGH),
        (80.0, RiskLevel.CRITICAL),
        (100.0, RiskLevel.CRITICAL),
    ])
    def test_boundaries(self, score, expected):
        assert classify_risk_level(score) == expected

    def test_level_bounds(self):
        assert level_bounds(RiskLevel.LOW) == (0.0, 30.0)
        assert level_bounds(RiskLevel.MEDIUM) == (30.0, 60.0)
        assert level_bounds(RiskLevel.HIGH) == (60.0, 80.0)
        assert level_bounds(RiskLevel.CRITICAL) == (80.0, None)

    def test_flag_threshold(self):
        assert not is_flagged(59.999)
        assert is_flagged(60.0)


class TestAlertTrigger:

    def test_low_score_with_critical_anomaly_alerts(self):
        anomalies = [_anomaly(0.5, RiskLevel.CRITICAL)]
        level = classify_risk_level(10.0)
        assert level == RiskLevel.LOW
        assert should_trigger_alert(level, anomalies) is True

    def test_high_level_alerts_without_anomalies(self):
        assert should_trigger_alert(RiskLevel.HIGH, []) is True

    def test_medium_with_minor_anomalies_does_not_alert(self):
        anomalies = [_anomaly(0.9, RiskLevel.MEDIUM), _anomaly(0.9, RiskLevel.LOW)]
        assert should_trigger_alert(RiskLevel.MEDIUM, anomalies) is False


class TestTopAnomalies:

    def test_ranked_by_confidence(self):
        a, b, c = _anomaly(0.9, type="a"), _anomaly(0.95, type="b"), _anomaly(0.2, type="c")
        top = top_anomalies([a, b, c], limit=2)
        assert [x.type for x in top] == ["b", "a"]

    def test_ties_keep_input_order(self):
        items = [_anomaly(0.5, type="first"), _anomaly(0.5, type="second")]
        assert [x.type for x in top_anomalies(items)] == ["first", "second"]

    def test_input_not_mutated(self):
        items = [_anomaly(0.1, type="x"), _anomaly(0.9, type="y")]
        top_anomalies(items)
        assert [x.type for x in items] == ["x", "y"]

    def test_limit_larger_than_list(self):
        assert len(top_anomalies([_anomaly(0.3)], limit=5)) == 1

    def test_zero_or_negative_limit(self):
        assert top_anomalies([_anomaly(0.3)], limit=0) == []
        assert top_anomalies([_anomaly(0.3)], limit=-1) == []


class TestConfidence:

    def test_supplied_value_wins(self):
        assert aggregate_confidence([_anomaly(0.1)], supplied=0.85) == 0.85

    def test_supplied_value_clamped(self):
        assert aggregate_confidence([], supplied=1.7) == 1.0

    def test_mean_of_anomalies(self):
        assert aggregate_confidence([_anomaly(0.6), _anomaly(1.0)]) == pytest.approx(0.8)

    def test_no_anomalies(self):
        assert aggregate_confidence([]) == 0.0


class TestEvaluateEndToEnd:

    def test_reference_visitor_is_high_and_flagged(self, high_risk_signals):
        result = evaluate(high_risk_signals)

        assert result.risk_score == pytest.approx(69.0)
        assert result.risk_level == RiskLevel.HIGH
        assert is_flagged(result.risk_score)
        assert result.should_trigger_alert is True

    def test_contributions_add_up(self, high_risk_signals):
        result = evaluate(high_risk_signals)
        assert {c.factor_name for c in result.contributions} == set(FACTOR_WEIGHTS)
        assert sum(c.weighted_score for c in result.contributions) == pytest.approx(result.risk_score)

    def test_explanation_lists_elevated_factors_first(self, high_risk_signals):
        result = evaluate(high_risk_signals)
        reasons = result.explanation.primary_reasons

        # behavior (90) then frequency (80); timing/historical stay below 60
        assert reasons[0].endswith("(score 90)")
        assert reasons[1].endswith("(score 80)")
        assert "Denied twice this week" in reasons
        assert len(reasons) == 2 + len(result.top_anomalies)

    def test_explanation_recommends_anomaly_review(self, high_risk_signals):
        result = evaluate(high_risk_signals)
        assert any("anomalies" in r for r in result.explanation.recommendations)

    def test_confidence_from_anomalies(self, high_risk_signals):
        result = evaluate(high_risk_signals)
        assert result.confidence == pytest.approx(0.8)
        assert result.high_confidence is True
        assert result.explanation.confidence == result.confidence

    def test_clean_visitor(self):
        result = evaluate(RiskSignals(frequency_score=5, timing_score=10,
                                      behavior_score=0, historical_score=0))
        assert result.risk_level == RiskLevel.LOW
        assert result.should_trigger_alert is False
        assert result.top_anomalies == []
        assert result.explanation.primary_reasons == []
        assert result.explanation.recommendations == ["Standard entry procedure"]

"""Unit tests for overview statistics derivation"""

from decimal import Decimal
from risk_engine.domain.statistics import build_overview
from risk_engine.utils.decimal_utils import divide, percentage, quantize_half_up


def test_build_overview_empty_store():
    stats = build_overview(total=0, approved=0, rejected=0, average_risk_score=None)

    assert stats.total_assessments == 0
    assert stats.pending_assessments == 0
    assert stats.approval_rate == 0.0
    assert stats.rejection_rate == 0.0
    assert stats.average_risk_score == 0.0


def test_build_overview_rates_and_pending():
    stats = build_overview(total=1250, approved=875, rejected=325, average_risk_score=425.5)

    assert stats.pending_assessments == 50
    assert stats.approval_rate == 70.0
    assert stats.rejection_rate == 26.0
    assert stats.average_risk_score == 425.5


def test_build_overview_rounds_rates_half_up():
    stats = build_overview(total=3, approved=2, rejected=1, average_risk_score=Decimal("458.3333333"))

    assert stats.approval_rate == 66.67
    assert stats.rejection_rate == 33.33
    assert stats.average_risk_score == 458.33


def test_build_overview_pending_never_negative():
    stats = build_overview(total=2, approved=2, rejected=1, average_risk_score=300)
    assert stats.pending_assessments == 0


def test_decimal_helpers_round_half_up():
    assert quantize_half_up(Decimal("2.345"), 2) == Decimal("2.35")
    assert quantize_half_up(Decimal("2.5"), 0) == Decimal("3")
    assert divide(Decimal("1"), Decimal("8")) == Decimal("0.1250")
    assert divide(Decimal("1"), Decimal("16")) == Decimal("0.0625")
    assert divide(Decimal("1"), Decimal("32"), 4) == Decimal("0.0313")
    assert percentage(1, 8) == 12.5
    assert percentage(5, 0) == 0.0

"""Overview statistics derived from stored assessment aggregates"""

from decimal import Decimal
from typing import Optional, Union

from risk_engine.domain.models import OverviewStatistics
from risk_engine.utils.decimal_utils import percentage, quantize_half_up


def build_overview(
    total: int,
    approved: int,
    rejected: int,
    average_risk_score: Optional[Union[Decimal, float]],
) -> OverviewStatistics:
    """
    Derive rates and pending count from raw counts.

    - Rates are count/total * 100, 2 decimal places, 0.0 when total is 0
    - Pending is whatever is neither approved nor rejected, never negative
    - Average is 0.0 when the store has no assessments
    """
    average = 0.0
    if average_risk_score is not None:
        average = float(quantize_half_up(Decimal(str(average_risk_score)), 2))

    return OverviewStatistics(
        total_assessments=total,
        approved_assessments=approved,
        rejected_assessments=rejected,
        pending_assessments=max(0, total - approved - rejected),
        approval_rate=percentage(approved, total),
        rejection_rate=percentage(rejected, total),
        average_risk_score=average,
    )

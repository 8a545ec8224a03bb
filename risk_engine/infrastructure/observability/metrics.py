"""Prometheus metrics for monitoring approval rates, risk distribution, and store health"""

from prometheus_client import Counter, Histogram

# Assessment metrics
assessment_counter = Counter(
    "risk_engine_assessment_total",
    "Total risk assessments computed and stored",
    ["outcome"],  # approved | rejected
)

risk_level_counter = Counter(
    "risk_engine_risk_level",
    "Risk assessments by risk level",
    ["level"],  # LOW | MODERATE | HIGH | VERY_HIGH
)

risk_score_histogram = Histogram(
    "risk_engine_risk_score",
    "Distribution of total risk scores",
    buckets=[300, 400, 500, 600, 700, 800, 900, 1000, 1050],
)

# Failure metrics
batch_item_failures_counter = Counter(
    "risk_engine_batch_item_failures_total",
    "Batch items that failed to evaluate or persist",
)

store_failures_counter = Counter(
    "risk_engine_store_failures_total",
    "Failed writes to the assessment store",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_assessment(approved: bool, risk_level: str, risk_score: int) -> None:
    """Record assessment metrics for monitoring approval rates and risk distribution"""
    outcome = "approved" if approved else "rejected"
    assessment_counter.labels(outcome=outcome).inc()
    risk_level_counter.labels(level=risk_level).inc()
    risk_score_histogram.observe(risk_score)

from prometheus_client import Counter, Histogram, Gauge, REGISTRY


# metrics may already be registered after hot reloads or repeated test imports
def get_or_create_metric(name, documentation, metric_type, **kwargs):
    try:
        return metric_type(name, documentation, **kwargs)
    except ValueError:
        return REGISTRY._names_to_collectors[name]


REQUESTS_TOTAL = get_or_create_metric(
    "study_planner_requests_total",
    "Total requests",
    Counter,
    labelnames=["endpoint", "status"],
)

SCHEDULE_LATENCY_SECONDS = get_or_create_metric(
    "study_planner_schedule_latency_seconds",
    "Time spent computing a schedule",
    Histogram,
)

SESSIONS_PLANNED_TOTAL = get_or_create_metric(
    "study_planner_sessions_planned_total",
    "Planned sessions by type",
    Counter,
    labelnames=["type"],
)

CONFLICTS_TOTAL = get_or_create_metric(
    "study_planner_conflicts_total", "Tasks that could not be fully scheduled", Counter
)

LAST_COVERAGE_PCT = get_or_create_metric(
    "study_planner_last_coverage_pct", "Coverage of the most recent schedule", Gauge
)

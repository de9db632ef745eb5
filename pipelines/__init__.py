"""파이프라인 모듈."""

from pipelines.analytics_pipeline import (
    AnalyticsPipeline,
    AnalyticsRun,
    PeriodInfo,
    data_period_info,
    fetch_all_analytics,
)

__all__ = [
    "AnalyticsPipeline",
    "AnalyticsRun",
    "PeriodInfo",
    "data_period_info",
    "fetch_all_analytics",
]

"""거래량 분석 파이프라인: 집계, 체인별 요약, 전체 순위.

Modules:
- aggregation: (chain, protocol, version) 합산
- chain_analytics: 체인별 / 전체 요약, compute_analytics
"""

from analysis.aggregation import AggregatedRow, aggregate_by_chain_protocol
from analysis.chain_analytics import (
    AnalyticsResult,
    BlockchainSummary,
    OverallSummary,
    ProtocolSummary,
    build_blockchain_summaries,
    calculate_overall,
    compute_analytics,
)

__all__ = [
    "AggregatedRow",
    "AnalyticsResult",
    "BlockchainSummary",
    "OverallSummary",
    "ProtocolSummary",
    "aggregate_by_chain_protocol",
    "build_blockchain_summaries",
    "calculate_overall",
    "compute_analytics",
]

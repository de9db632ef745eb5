"""체인별 / 전체 거래량 분석.

집계 행 → 체인별 요약 (총 거래량, 총 거래 수, 프로토콜 순위)
       → 전체 요약 (1위 체인, 그 체인의 1위 프로토콜, 전체 합계)

열화 규칙:
  - 데이터 없는 체인 → 0 요약 (키 누락 없음)
  - fetch 실패 체인 → failed_chains / partial 로 명시
  - 이 모듈은 예외를 던지지 않는다
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence

from analysis.aggregation import AggregatedRow, aggregate_by_chain_protocol
from normalizers.chain_response import NormalizedRow, normalize_chain_response
from normalizers.numeric import CoercionReport, Number
from normalizers.protocol import UNKNOWN_PROTOCOL, format_protocol_label
from normalizers.trades import ProviderSchema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProtocolSummary:
    """프로토콜별 요약 (거래량은 정수 반올림)."""
    name: str
    version: Optional[str]
    volume: int
    transactions: Number

    @property
    def label(self) -> str:
        return format_protocol_label(self.name, self.version)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "version": self.version,
            "volume": self.volume,
            "transactions": self.transactions,
        }


@dataclass(frozen=True)
class BlockchainSummary:
    """체인별 요약."""
    network: str
    total_volume: int = 0
    total_transactions: Number = 0
    leading_protocols: list[ProtocolSummary] = field(default_factory=list)

    @property
    def top_protocol(self) -> Optional[ProtocolSummary]:
        return self.leading_protocols[0] if self.leading_protocols else None

    def to_dict(self) -> dict:
        return {
            "network": self.network,
            "total_volume": self.total_volume,
            "total_transactions": self.total_transactions,
            "leading_protocols": [p.to_dict() for p in self.leading_protocols],
        }


@dataclass(frozen=True)
class OverallSummary:
    """전체 요약."""
    top_blockchain: str
    leading_protocol: str
    total_volume: int
    total_transactions: Number

    def to_dict(self) -> dict:
        return {
            "top_blockchain": self.top_blockchain,
            "leading_protocol": self.leading_protocol,
            "total_volume": self.total_volume,
            "total_transactions": self.total_transactions,
        }


@dataclass(frozen=True)
class AnalyticsResult:
    """분석 결과 전체."""
    overall: OverallSummary
    blockchains: dict[str, BlockchainSummary]
    partial: bool
    failed_chains: list[str]
    coercion_fallbacks: int = 0
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "overall": self.overall.to_dict(),
            "blockchains": {k: v.to_dict() for k, v in self.blockchains.items()},
            "partial": self.partial,
            "failed_chains": list(self.failed_chains),
            "coercion_fallbacks": self.coercion_fallbacks,
            "warnings": list(self.warnings),
        }


def round_half_up(value: float) -> int:
    """0.5는 올림 (round()는 banker's rounding). NaN/inf는 0."""
    if not math.isfinite(value):
        return 0
    return int(math.floor(value + 0.5))


def summarize_chain(chain: str, rows: Sequence[AggregatedRow]) -> BlockchainSummary:
    """체인 1개 요약. rows는 이미 해당 체인으로 필터된 집계 행."""
    protocols = [
        ProtocolSummary(
            name=row.protocol,
            version=row.version,
            volume=round_half_up(row.trade_amount),
            transactions=row.count,
        )
        for row in rows
    ]
    # sorted는 stable → 동률이면 집계 순서 유지
    protocols = sorted(protocols, key=lambda p: p.volume, reverse=True)

    return BlockchainSummary(
        network=chain,
        total_volume=sum(p.volume for p in protocols),
        total_transactions=sum(p.transactions for p in protocols),
        leading_protocols=protocols,
    )


def build_blockchain_summaries(
    rows: Sequence[AggregatedRow],
    chains: Sequence[str],
) -> dict[str, BlockchainSummary]:
    """정식 체인 목록 순서대로 체인별 요약. 모든 체인이 항목을 가진다."""
    return {
        chain: summarize_chain(chain, [r for r in rows if r.chain == chain])
        for chain in chains
    }


def calculate_overall(
    blockchains: Mapping[str, BlockchainSummary],
    chains: Sequence[str],
) -> OverallSummary:
    """1위 체인 선정 + 전체 합계.

    초기값은 정식 목록의 첫 체인. 더 큰 거래량일 때만 교체하므로
    동률이면 목록상 앞선 체인이 이긴다.
    """
    ordered = [blockchains[c] for c in chains if c in blockchains]
    total_volume = sum(b.total_volume for b in ordered)
    total_transactions = sum(b.total_transactions for b in ordered)

    if not ordered:
        return OverallSummary("", UNKNOWN_PROTOCOL, total_volume, total_transactions)

    top = ordered[0]
    for summary in ordered[1:]:
        if summary.total_volume > top.total_volume:
            top = summary

    top_protocol = top.top_protocol
    return OverallSummary(
        top_blockchain=top.network,
        leading_protocol=top_protocol.label if top_protocol else UNKNOWN_PROTOCOL,
        total_volume=total_volume,
        total_transactions=total_transactions,
    )


def find_failed_chains(
    raw_per_chain_payloads: Mapping[str, Any],
    chains: Sequence[str],
) -> list[str]:
    """payload가 없거나 None인 체인 (정식 순서 유지)."""
    return [c for c in chains if raw_per_chain_payloads.get(c) is None]


def compute_analytics(
    raw_per_chain_payloads: Mapping[str, Any],
    chains: Sequence[str],
    schemas: Mapping[str, ProviderSchema] | None = None,
) -> AnalyticsResult:
    """raw payload → AnalyticsResult.

    Args:
        raw_per_chain_payloads: 체인 → GraphQL `data` 객체. 실패한 체인은 key 없음(또는 None).
        chains: 정식 체인 목록 (순서 = 동률 판정 / 표시 순서).
        schemas: provider 응답 변형 매핑. None이면 기본값.

    Returns:
        AnalyticsResult. 같은 입력이면 항상 같은 결과.
    """
    if not isinstance(raw_per_chain_payloads, Mapping):
        raw_per_chain_payloads = {}

    report = CoercionReport()
    rows: list[NormalizedRow] = []
    for chain in chains:
        payload = raw_per_chain_payloads.get(chain)
        if payload is None:
            continue
        rows.extend(normalize_chain_response(payload, chain, schemas, report))

    aggregated = aggregate_by_chain_protocol(rows, report)
    blockchains = build_blockchain_summaries(aggregated, chains)
    overall = calculate_overall(blockchains, chains)
    failed = find_failed_chains(raw_per_chain_payloads, chains)
    logger.debug(
        "[Analytics] %d행 정규화, 집계 %d행, 실패 체인=%s",
        len(rows), len(aggregated), failed,
    )

    return AnalyticsResult(
        overall=overall,
        blockchains=blockchains,
        partial=len(failed) > 0,
        failed_chains=failed,
        coercion_fallbacks=report.fallbacks,
        warnings=list(report.warnings),
    )

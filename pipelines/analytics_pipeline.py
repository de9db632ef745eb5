"""체인 거래량 분석 파이프라인.

체인별 동시 조회 → 응답 정규화 → 집계 → 체인/프로토콜 순위 → 로그
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional

from analysis.chain_analytics import AnalyticsResult, compute_analytics
from collectors.api_client import BitqueryClient, BitqueryClientConfig
from collectors.chain_config import AnalyticsConfig
from collectors.fetch_orchestrator import ChainFetchResult, fetch_all_chains
from metrics.latency import summarize_latencies
from normalizers.chain_map import display_chain
from normalizers.trades import ProviderSchema

logger = logging.getLogger(__name__)

# fallback 경고는 앞에서 몇 건만 로그에 남긴다
_MAX_LOGGED_WARNINGS = 5


@dataclass(frozen=True)
class PeriodInfo:
    """조회 기간 표시 정보."""
    start_date: str
    end_date: str
    period: str


def data_period_info(lookback_days: int = 30, now: datetime | None = None) -> PeriodInfo:
    """조회 기간 라벨 ("Last 30 days", "May 01, 2025" ~ "May 31, 2025")."""
    now = now or datetime.now(timezone.utc)
    start = now - timedelta(days=lookback_days)
    return PeriodInfo(
        start_date=start.strftime("%B %d, %Y"),
        end_date=now.strftime("%B %d, %Y"),
        period=f"Last {lookback_days} days",
    )


@dataclass
class AnalyticsRun:
    """파이프라인 1회 실행 결과."""
    result: AnalyticsResult
    fetches: list[ChainFetchResult] = field(default_factory=list)
    period: Optional[PeriodInfo] = None
    duration_ms: float = 0.0

    @property
    def raw_responses(self) -> dict[str, Any]:
        """디버그용: 체인 → data 또는 error."""
        return {
            r.chain: r.data if r.ok else {"error": r.error}
            for r in self.fetches
        }

    @property
    def latency_stats(self) -> dict:
        return summarize_latencies(r.latency for r in self.fetches if r.latency)


class AnalyticsPipeline:
    """체인 거래량 분석 파이프라인."""

    def __init__(
        self,
        config: AnalyticsConfig,
        client: BitqueryClient | None = None,
        schemas: Mapping[str, ProviderSchema] | None = None,
    ) -> None:
        """
        Args:
            config: 체인 목록 / endpoint / 쿼리 / timeout.
            client: 공유 클라이언트. None이면 실행마다 생성 후 종료.
            schemas: provider 응답 변형. None이면 기본값.
        """
        self._config = config
        self._client = client
        self._schemas = schemas

    async def run(self, api_key: str | None = None, now: datetime | None = None) -> AnalyticsRun:
        """조회 + 분석 1회.

        Raises:
            ValueError: client도 api_key도 없는 경우.
        """
        started = time.monotonic()

        client = self._client
        owns_client = client is None
        if client is None:
            if not api_key:
                raise ValueError("Bitquery API 키 필요")
            client = BitqueryClient(
                api_key,
                config=BitqueryClientConfig(total_timeout=self._config.timeout_sec),
            )

        try:
            batch = await fetch_all_chains(client, self._config, now)
        finally:
            if owns_client:
                await client.close()

        result = compute_analytics(batch.payloads, self._config.chains, self._schemas)
        duration_ms = (time.monotonic() - started) * 1000
        self._log_result(result, duration_ms)

        return AnalyticsRun(
            result=result,
            fetches=batch.results,
            period=data_period_info(self._config.lookback_days, now),
            duration_ms=duration_ms,
        )

    @staticmethod
    def _log_result(result: AnalyticsResult, duration_ms: float) -> None:
        if result.partial:
            logger.warning(
                "[Pipeline] 일부 체인 데이터 없음: %s", ", ".join(result.failed_chains),
            )
        if result.coercion_fallbacks:
            logger.warning(
                "[Pipeline] 숫자 변환 fallback %d건", result.coercion_fallbacks,
            )
            for msg in result.warnings[:_MAX_LOGGED_WARNINGS]:
                logger.debug("[Pipeline] %s", msg)

        overall = result.overall
        logger.info(
            "✅ 분석 완료: top=%s (%s), volume=$%s, tx=%s (%.0fms)",
            display_chain(overall.top_blockchain) or "-",
            overall.leading_protocol,
            f"{overall.total_volume:,}",
            f"{overall.total_transactions:,}",
            duration_ms,
        )


async def fetch_all_analytics(api_key: str, config: AnalyticsConfig) -> AnalyticsResult:
    """API 키로 전체 분석 1회 실행 (편의 함수)."""
    run = await AnalyticsPipeline(config).run(api_key)
    return run.result

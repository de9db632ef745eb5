"""체인별 Bitquery 동시 조회.

체인마다 요청 1개를 동시에 보내고 (asyncio.gather), 각 요청은
개별 timeout + 예외 처리로 감싼다. 한 체인의 실패/지연이 다른 체인을
막거나 전체 배치를 실패시키지 않는다.

열화 규칙:
  - HTTP 오류 / GraphQL errors / timeout → warning 로그 + 해당 체인 "데이터 없음"
  - 성공한 체인의 `data`만 분석 파이프라인으로 전달
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import aiohttp

from collectors.api_client import BitqueryClient, BitqueryError
from collectors.chain_config import AnalyticsConfig, ChainSource
from metrics.latency import FetchLatencyTracker

logger = logging.getLogger(__name__)


@dataclass
class ChainFetchResult:
    """체인 1개 조회 결과."""
    chain: str
    data: Optional[dict[str, Any]] = None
    error: Optional[str] = None
    latency: Optional[FetchLatencyTracker] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.data is not None


@dataclass
class FetchBatch:
    """조회 배치 결과 (정식 체인 순서)."""
    results: list[ChainFetchResult] = field(default_factory=list)

    @property
    def payloads(self) -> dict[str, dict[str, Any]]:
        """성공한 체인 → GraphQL data. 실패 체인은 key 없음."""
        return {r.chain: r.data for r in self.results if r.ok}

    @property
    def failed_chains(self) -> list[str]:
        return [r.chain for r in self.results if not r.ok]

    @property
    def latencies(self) -> list[FetchLatencyTracker]:
        return [r.latency for r in self.results if r.latency is not None]


def since_timestamp(lookback_days: int, now: datetime | None = None) -> str:
    """조회 시작 시각 (ISO-8601 UTC, 밀리초, "Z")."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    since = now.astimezone(timezone.utc) - timedelta(days=lookback_days)
    return since.strftime("%Y-%m-%dT%H:%M:%S.") + f"{since.microsecond // 1000:03d}Z"


async def fetch_chain(
    client: BitqueryClient,
    source: ChainSource,
    since: str,
    timeout: float,
) -> ChainFetchResult:
    """체인 1개 조회. 예외를 던지지 않고 ChainFetchResult로 실패를 돌려준다."""
    tracker = FetchLatencyTracker(chain=source.chain).mark_request_start()
    try:
        data = await asyncio.wait_for(
            client.execute(source.endpoint, source.query, source.variables(since)),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        tracker.mark_response(ok=False)
        logger.warning("[Fetch] %s: timeout (%.0f초)", source.chain, timeout)
        return ChainFetchResult(
            source.chain, error=f"timeout after {timeout:.0f}s", latency=tracker,
        )
    except (BitqueryError, aiohttp.ClientError, ValueError) as e:
        tracker.mark_response(ok=False)
        logger.warning("[Fetch] %s 조회 실패: %s", source.chain, e)
        return ChainFetchResult(
            source.chain, error=f"{type(e).__name__}: {e}", latency=tracker,
        )

    tracker.mark_response(ok=True)
    logger.debug("[Fetch] %s", tracker.format_summary())
    return ChainFetchResult(source.chain, data=data, latency=tracker)


async def fetch_all_chains(
    client: BitqueryClient,
    config: AnalyticsConfig,
    now: datetime | None = None,
) -> FetchBatch:
    """설정된 모든 체인을 동시에 조회."""
    since = since_timestamp(config.lookback_days, now)
    tasks = [
        fetch_chain(client, config.sources[chain], since, config.timeout_sec)
        for chain in config.chains
    ]
    results = await asyncio.gather(*tasks)

    batch = FetchBatch(results=list(results))
    logger.info(
        "[Fetch] %d/%d 체인 성공 (since=%s)",
        len(batch.payloads), len(config.chains), since,
    )
    return batch

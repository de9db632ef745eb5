"""체인별 조회 속도 측정 모듈.

요청 시작 → 응답(또는 실패/timeout)까지의 지연 시간을 체인 단위로 기록.

타임스탬프 포인트:
- request_start_ts: GraphQL 요청 시작
- response_ts: 응답 수신 또는 실패 확정
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Iterable

logger = logging.getLogger(__name__)


@dataclass
class FetchLatencyTracker:
    """체인 조회 속도 트래커.

    사용법:
        tracker = FetchLatencyTracker(chain="ethereum")
        tracker.mark_request_start()
        # ... GraphQL 요청 ...
        tracker.mark_response(ok=True)
        tracker.format_summary()  # "✅ ethereum: 842ms"
    """

    chain: str

    # 타임스탬프 (monotonic, 초 단위)
    request_start_ts: float | None = None
    response_ts: float | None = None

    ok: bool | None = None

    def mark_request_start(self) -> "FetchLatencyTracker":
        """요청 시작 시점 기록."""
        self.request_start_ts = time.monotonic()
        return self

    def mark_response(self, ok: bool) -> "FetchLatencyTracker":
        """응답 수신 (또는 실패) 시점 기록."""
        self.response_ts = time.monotonic()
        self.ok = ok
        return self

    @property
    def duration_ms(self) -> float | None:
        """요청 → 응답 시간 (밀리초)."""
        if self.request_start_ts is None or self.response_ts is None:
            return None
        return (self.response_ts - self.request_start_ts) * 1000

    def format_summary(self) -> str:
        """지연 시간 요약 문자열.

        Returns:
            "✅ ethereum: 1.2s" / "❌ base: 15.0s" / "" (미측정)
        """
        duration = self.duration_ms
        if duration is None:
            return ""

        icon = "✅" if self.ok else "❌"
        if duration >= 1000:
            return f"{icon} {self.chain}: {duration/1000:.1f}s"
        return f"{icon} {self.chain}: {duration:.0f}ms"


def summarize_latencies(trackers: Iterable[FetchLatencyTracker]) -> dict:
    """체인별 조회 속도 통계.

    Returns:
        {
            "count": 측정 건수,
            "failed": 실패 건수,
            "avg_ms": 평균,
            "min_ms": 최소,
            "max_ms": 최대,
            "slowest_chain": 가장 느린 체인,
        }
    """
    measured = [t for t in trackers if t.duration_ms is not None]
    if not measured:
        return {
            "count": 0,
            "failed": 0,
            "avg_ms": None,
            "min_ms": None,
            "max_ms": None,
            "slowest_chain": None,
        }

    durations = [t.duration_ms for t in measured]
    slowest = max(measured, key=lambda t: t.duration_ms)
    logger.debug(
        "[Latency] %d건 측정, 가장 느린 체인=%s (%.0fms)",
        len(measured), slowest.chain, slowest.duration_ms,
    )
    return {
        "count": len(measured),
        "failed": sum(1 for t in measured if not t.ok),
        "avg_ms": sum(durations) / len(durations),
        "min_ms": min(durations),
        "max_ms": max(durations),
        "slowest_chain": slowest.chain,
    }

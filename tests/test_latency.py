"""체인 조회 속도 측정 테스트."""

import logging
import time

from metrics.latency import FetchLatencyTracker, summarize_latencies


def _tracker(chain, start, end, ok=True):
    return FetchLatencyTracker(chain=chain, request_start_ts=start, response_ts=end, ok=ok)


class TestFetchLatencyTracker:
    """FetchLatencyTracker 단위 테스트."""

    def test_mark_request_start(self):
        tracker = FetchLatencyTracker(chain="ethereum")
        assert tracker.request_start_ts is None

        tracker.mark_request_start()
        assert tracker.request_start_ts is not None

    def test_duration_ms(self):
        tracker = FetchLatencyTracker(chain="ethereum").mark_request_start()
        time.sleep(0.05)  # 50ms 대기
        tracker.mark_response(ok=True)

        duration = tracker.duration_ms
        assert duration is not None
        assert duration >= 40
        assert duration < 1000
        assert tracker.ok is True

    def test_duration_none_without_response(self):
        tracker = FetchLatencyTracker(chain="base").mark_request_start()
        assert tracker.duration_ms is None
        assert tracker.format_summary() == ""

    def test_format_summary_ms(self):
        assert _tracker("ethereum", 1.0, 1.842).format_summary() == "✅ ethereum: 842ms"

    def test_format_summary_seconds(self):
        assert _tracker("base", 0.0, 15.0, ok=False).format_summary() == "❌ base: 15.0s"


class TestSummarizeLatencies:
    def test_empty(self):
        assert summarize_latencies([]) == {
            "count": 0,
            "failed": 0,
            "avg_ms": None,
            "min_ms": None,
            "max_ms": None,
            "slowest_chain": None,
        }

    def test_stats(self):
        stats = summarize_latencies([
            _tracker("ethereum", 0.0, 0.1),
            _tracker("solana", 0.0, 0.3, ok=False),
            FetchLatencyTracker(chain="base"),  # 미측정 → 제외
        ])
        assert stats["count"] == 2
        assert stats["failed"] == 1
        assert abs(stats["avg_ms"] - 200) < 1e-6
        assert abs(stats["min_ms"] - 100) < 1e-6
        assert abs(stats["max_ms"] - 300) < 1e-6
        assert stats["slowest_chain"] == "solana"

    def test_summary_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="metrics.latency"):
            summarize_latencies([_tracker("arbitrum", 0.0, 0.25)])
        assert "arbitrum" in caplog.text

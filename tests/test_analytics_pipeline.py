"""분석 파이프라인 통합 테스트 (mock 클라이언트)."""

import logging
from datetime import datetime, timezone

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from collectors.api_client import BitqueryError
from pipelines.analytics_pipeline import (
    AnalyticsPipeline,
    PeriodInfo,
    data_period_info,
    fetch_all_analytics,
)

NOW = datetime(2025, 6, 30, 12, 0, tzinfo=timezone.utc)

_NETWORK_TO_CHAIN = {
    "eth": "ethereum",
    "bsc": "bsc",
    "arbitrum": "arbitrum",
    "base": "base",
}


def _client_for(payloads: dict):
    """체인별 payload를 돌려주는 mock 클라이언트. payload 없는 체인은 BitqueryError."""

    async def execute(endpoint, query, variables):
        chain = _NETWORK_TO_CHAIN.get(variables.get("network"), "solana")
        if chain not in payloads:
            raise BitqueryError("API request failed with status 500: down", status=500)
        return payloads[chain]

    client = MagicMock()
    client.execute = AsyncMock(side_effect=execute)
    client.close = AsyncMock()
    return client


class TestDataPeriodInfo:
    def test_labels(self):
        assert data_period_info(30, NOW) == PeriodInfo(
            start_date="May 31, 2025",
            end_date="June 30, 2025",
            period="Last 30 days",
        )


class TestAnalyticsPipeline:
    """AnalyticsPipeline.run 테스트."""

    @pytest.mark.asyncio
    async def test_run(self, analytics_config, sample_payloads):
        client = _client_for(sample_payloads)
        run = await AnalyticsPipeline(analytics_config, client=client).run(now=NOW)

        assert run.result.partial is False
        assert run.result.overall.top_blockchain == "ethereum"
        assert run.period.period == "Last 30 days"
        assert run.duration_ms >= 0
        assert set(run.raw_responses) == set(analytics_config.chains)
        assert run.latency_stats["count"] == 5
        # 외부에서 받은 클라이언트는 닫지 않는다
        client.close.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_chain_is_partial(self, analytics_config, sample_payloads, caplog):
        del sample_payloads["base"]
        client = _client_for(sample_payloads)

        with caplog.at_level(logging.WARNING):
            run = await AnalyticsPipeline(analytics_config, client=client).run(now=NOW)

        assert run.result.partial is True
        assert run.result.failed_chains == ["base"]
        assert "error" in run.raw_responses["base"]
        assert run.latency_stats["failed"] == 1
        assert "base" in caplog.text

    @pytest.mark.asyncio
    async def test_requires_client_or_key(self, analytics_config):
        with pytest.raises(ValueError):
            await AnalyticsPipeline(analytics_config).run()

    @pytest.mark.asyncio
    async def test_owned_client_closed(self, analytics_config, sample_payloads):
        client = _client_for(sample_payloads)
        with patch("pipelines.analytics_pipeline.BitqueryClient", return_value=client) as cls:
            run = await AnalyticsPipeline(analytics_config).run("secret", now=NOW)

        assert cls.call_args.args[0] == "secret"
        assert cls.call_args.kwargs["config"].total_timeout == analytics_config.timeout_sec
        client.close.assert_awaited_once()
        assert run.result.partial is False

    @pytest.mark.asyncio
    async def test_fetch_all_analytics(self, analytics_config, sample_payloads):
        client = _client_for(sample_payloads)
        with patch("pipelines.analytics_pipeline.BitqueryClient", return_value=client):
            result = await fetch_all_analytics("secret", analytics_config)
        assert result.overall.leading_protocol == "Uniswap (v3)"

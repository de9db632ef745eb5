"""pytest 공통 fixture.

Bitquery GraphQL `data` 객체 샘플 (V2 EVM / EAP Solana) + 기본 설정.
"""

import pytest
from typing import Any

from collectors.chain_config import AnalyticsConfig


CHAINS = ["ethereum", "bsc", "arbitrum", "base", "solana"]


# =============================================================================
# Bitquery 응답 샘플
# =============================================================================


def evm_payload(*trades: dict[str, Any]) -> dict[str, Any]:
    """V2 EVM 응답 data."""
    return {"EVM": {"DEXTrades": list(trades)}}


def solana_payload(*trades: dict[str, Any]) -> dict[str, Any]:
    """EAP Solana 응답 data."""
    return {"Solana": {"DEXTrades": list(trades)}}


def evm_trade(family, version, count, amount) -> dict[str, Any]:
    return {
        "Trade": {"Dex": {"ProtocolFamily": family, "ProtocolVersion": version}},
        "count": count,
        "tradeAmount": amount,
    }


def solana_trade(family, name, count, amount) -> dict[str, Any]:
    return {
        "Trade": {"Dex": {"ProtocolFamily": family, "ProtocolName": name}},
        "count": count,
        "tradeAmount": amount,
    }


@pytest.fixture
def chains() -> list[str]:
    return list(CHAINS)


@pytest.fixture
def sample_payloads() -> dict[str, Any]:
    """5개 체인 정상 응답 (문자열/숫자 혼합)."""
    return {
        "ethereum": evm_payload(
            evm_trade("Uniswap", "3", "1000", "5000000.4"),
            evm_trade("Uniswap", "V2", 500, 1000000),
            evm_trade("Curve", None, "20", "250000.5"),
        ),
        "bsc": evm_payload(
            evm_trade("PancakeSwap", "v3", "3000", "2000000"),
        ),
        "arbitrum": evm_payload(
            evm_trade("Uniswap", "3", 100, "300000"),
        ),
        "base": evm_payload(
            evm_trade("Aerodrome", "1", 200, "400000"),
        ),
        "solana": solana_payload(
            solana_trade("Raydium", "raydium_clmm", "7000", "3000000"),
            solana_trade("Orca", "Orca", "50", "100.5"),
        ),
    }


# =============================================================================
# 설정
# =============================================================================


@pytest.fixture
def raw_config() -> dict[str, Any]:
    """config.yaml 과 같은 모양의 dict."""
    return {
        "chains": list(CHAINS),
        "endpoints": {
            "v2": "https://v2.example/graphql",
            "eap": "https://eap.example/graphql",
        },
        "networks": {
            "ethereum": {"provider": "v2", "query": "evm", "network": "eth"},
            "bsc": {"provider": "v2", "query": "evm", "network": "bsc"},
            "arbitrum": {"provider": "v2", "query": "evm", "network": "arbitrum"},
            "base": {"provider": "v2", "query": "evm", "network": "base"},
            "solana": {"provider": "eap", "query": "solana"},
        },
        "queries": {
            "evm": "query Evm($network: evm_network, $since: DateTime) { EVM { DEXTrades { count } } }",
            "solana": "query Sol($since: DateTime) { Solana { DEXTrades { count } } }",
        },
        "fetch": {"timeout_seconds": 5, "lookback_days": 30},
        "api_key_env": "TEST_BITQUERY_KEY",
    }


@pytest.fixture
def analytics_config(raw_config) -> AnalyticsConfig:
    return AnalyticsConfig.from_dict(raw_config)

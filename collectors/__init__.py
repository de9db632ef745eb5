"""Collectors package.

데이터 수집기 모듈:
  - api_client: Bitquery GraphQL HTTP 클라이언트
  - chain_config: config.yaml → AnalyticsConfig
  - fetch_orchestrator: 체인별 동시 조회 (체인 단위 실패 격리)

Note: aiohttp 의존 모듈은 lazy import (필요시 import)로 시작 시간 최적화.
      직접 사용 시: from collectors.api_client import BitqueryClient
"""

__all__ = [
    # API Client (lazy import)
    "BitqueryClient",
    "BitqueryClientConfig",
    "BitqueryError",
    "get_api_key",
    # Config (lazy import)
    "AnalyticsConfig",
    "ChainSource",
    "load_config",
    # Fetch Orchestrator (lazy import)
    "ChainFetchResult",
    "FetchBatch",
    "fetch_all_chains",
]


def __getattr__(name: str):
    """Lazy import for collector modules."""
    if name in ("BitqueryClient", "BitqueryClientConfig", "BitqueryError", "get_api_key"):
        from collectors.api_client import (
            BitqueryClient, BitqueryClientConfig, BitqueryError, get_api_key,
        )
        return locals()[name]
    elif name in ("AnalyticsConfig", "ChainSource", "load_config"):
        from collectors.chain_config import AnalyticsConfig, ChainSource, load_config
        return locals()[name]
    elif name in ("ChainFetchResult", "FetchBatch", "fetch_all_chains"):
        from collectors.fetch_orchestrator import ChainFetchResult, FetchBatch, fetch_all_chains
        return locals()[name]
    raise AttributeError(f"module 'collectors' has no attribute '{name}'")

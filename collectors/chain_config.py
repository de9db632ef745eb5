"""수집 설정 (config.yaml → AnalyticsConfig).

config.yaml 구조:
  chains:      정식 체인 목록 (순서 = 동률 판정 / 표시 순서)
  endpoints:   provider → URL (v2, eap)
  networks:    체인 → {provider, query, network}
  queries:     쿼리 이름 → GraphQL 본문
  fetch:       {timeout_seconds, lookback_days}
  api_key_env: API 키 환경변수 이름
  logging:     {level, file}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Iterable, Optional

import yaml

from normalizers.chain_map import DEFAULT_CHAINS, bitquery_network, normalize_chain

logger = logging.getLogger(__name__)

BITQUERY_V2_ENDPOINT = "https://streaming.bitquery.io/graphql"
BITQUERY_EAP_ENDPOINT = "https://streaming.bitquery.io/eap"

DEFAULT_ENDPOINTS = {
    "v2": BITQUERY_V2_ENDPOINT,
    "eap": BITQUERY_EAP_ENDPOINT,
}

DEFAULT_TIMEOUT_SEC = 15.0
DEFAULT_LOOKBACK_DAYS = 30
DEFAULT_API_KEY_ENV = "BITQUERY_API_KEY"


@dataclass(frozen=True)
class ChainSource:
    """체인 1개의 조회 방법."""
    chain: str
    endpoint: str
    query: str
    network: Optional[str] = None  # Bitquery evm_network 인자 (Solana는 없음)

    def variables(self, since: str) -> dict[str, str]:
        variables = {"since": since}
        if self.network:
            variables["network"] = self.network
        return variables


@dataclass(frozen=True)
class AnalyticsConfig:
    """파이프라인 설정."""
    chains: list[str]
    sources: dict[str, ChainSource] = field(default_factory=dict)
    timeout_sec: float = DEFAULT_TIMEOUT_SEC
    lookback_days: int = DEFAULT_LOOKBACK_DAYS
    api_key_env: str = DEFAULT_API_KEY_ENV

    @property
    def endpoints(self) -> dict[str, str]:
        """체인 → endpoint URL."""
        return {chain: src.endpoint for chain, src in self.sources.items()}

    @classmethod
    def from_dict(cls, config: dict[str, Any] | None) -> "AnalyticsConfig":
        """yaml.safe_load 결과 → AnalyticsConfig.

        Raises:
            ValueError: 체인 목록이 비었거나, provider/쿼리를 찾을 수 없는 경우.
        """
        config = config or {}
        chains = [normalize_chain(c) for c in (config.get("chains") or DEFAULT_CHAINS)]
        chains = [c for c in chains if c]
        if not chains:
            raise ValueError("config: chains 비어 있음")

        endpoints = {**DEFAULT_ENDPOINTS, **(config.get("endpoints") or {})}
        queries = config.get("queries") or {}
        networks = config.get("networks") or {}
        fetch = config.get("fetch") or {}

        sources: dict[str, ChainSource] = {}
        for chain in chains:
            net = networks.get(chain) or {}
            provider = net.get("provider", "eap" if chain == "solana" else "v2")
            endpoint = endpoints.get(provider)
            if not endpoint:
                raise ValueError(f"config: {chain} provider '{provider}' endpoint 없음")

            query_name = net.get("query")
            query = queries.get(query_name) if query_name else None
            if not query:
                raise ValueError(f"config: {chain} 쿼리 없음 (query={query_name!r})")

            sources[chain] = ChainSource(
                chain=chain,
                endpoint=endpoint,
                query=query,
                network=net.get("network", bitquery_network(chain)),
            )

        return cls(
            chains=chains,
            sources=sources,
            timeout_sec=float(fetch.get("timeout_seconds", DEFAULT_TIMEOUT_SEC)),
            lookback_days=int(fetch.get("lookback_days", DEFAULT_LOOKBACK_DAYS)),
            api_key_env=config.get("api_key_env", DEFAULT_API_KEY_ENV),
        )

    def restrict(self, chains: Iterable[str]) -> "AnalyticsConfig":
        """일부 체인만 조회 (정식 순서 유지). 설정에 없는 체인은 무시."""
        wanted = {normalize_chain(c) for c in chains}
        unknown = wanted - set(self.chains)
        if unknown:
            logger.warning("[Config] 설정에 없는 체인 무시: %s", sorted(unknown))
        selected = [c for c in self.chains if c in wanted]
        if not selected:
            raise ValueError(f"선택된 체인 없음: {sorted(wanted)}")
        return replace(
            self,
            chains=selected,
            sources={c: self.sources[c] for c in selected},
        )


def load_config(path: Path | str) -> dict[str, Any]:
    """config.yaml 로드.

    Raises:
        FileNotFoundError: 파일 없음.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"설정 파일 없음: {p}")
    with open(p, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}

"""DEXTrades 배열 탐색.

Bitquery 응답은 체인/API 버전마다 모양이 다르다:
  V2 EVM:     {"EVM": {"DEXTrades": [...]}}
  EAP Solana: {"Solana": {"DEXTrades": [...]}}
  V1 (구버전): {"ethereum": {"dexTrades": [...]}}

탐색 순서:
  1. schema: wrapper key로 선택된 ProviderSchema의 trades_key
  2. key: 키 이름에 "DEXTrade" 포함 (대소문자 무시)
  3. structural: 첫 원소가 Trade.Dex를 가진 첫 번째 배열 (마지막 수단)
  4. none: 빈 배열 (에러 아님, "이 체인 데이터 없음")
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from normalizers.protocol import DEFAULT_DEX_FIELDS, DexFieldNames

_DEX_TRADE_KEY = re.compile(r"DEXTrade", re.IGNORECASE)

STRATEGY_SCHEMA = "schema"
STRATEGY_KEY = "key"
STRATEGY_STRUCTURAL = "structural"
STRATEGY_NONE = "none"


@dataclass(frozen=True)
class ProviderSchema:
    """provider 응답 변형 하나에 대한 필드 매핑.

    discriminator는 응답 최상위 wrapper key ("EVM", "Solana").
    """
    name: str
    discriminator: str
    trades_key: str = "DEXTrades"
    dex_path: tuple[str, ...] = ("Trade", "Dex")
    dex_fields: DexFieldNames = DEFAULT_DEX_FIELDS
    count_field: str = "count"
    amount_field: str = "tradeAmount"


# 지원 변형 (discriminator → schema)
DEFAULT_SCHEMAS: dict[str, ProviderSchema] = {
    "EVM": ProviderSchema(name="bitquery_v2_evm", discriminator="EVM"),
    "Solana": ProviderSchema(name="bitquery_eap_solana", discriminator="Solana"),
}

# 구조 탐색 / schema 미선택 시 기본 매핑
GENERIC_SCHEMA = ProviderSchema(name="generic", discriminator="")


@dataclass
class TradeLocation:
    """탐색 결과: 배열 + 어떤 경로로 찾았는지."""
    trades: list = field(default_factory=list)
    strategy: str = STRATEGY_NONE
    key: Optional[str] = None


def select_schema(
    wrapper_key: Any,
    schemas: Mapping[str, ProviderSchema] | None = None,
) -> Optional[ProviderSchema]:
    """wrapper key로 schema 선택. 등록되지 않은 key면 None."""
    registry = DEFAULT_SCHEMAS if schemas is None else schemas
    if not isinstance(wrapper_key, str):
        return None
    return registry.get(wrapper_key)


def dig(obj: Any, path: tuple[str, ...]) -> Any:
    """중첩 dict 경로 조회. 중간에 dict가 아니면 None."""
    for part in path:
        if not isinstance(obj, Mapping):
            return None
        obj = obj.get(part)
    return obj


def _looks_like_trades(value: Any, dex_path: tuple[str, ...]) -> bool:
    if not isinstance(value, list) or not value:
        return False
    return isinstance(dig(value[0], dex_path), Mapping)


def locate_trades(
    container: Any,
    schema: Optional[ProviderSchema] = None,
) -> TradeLocation:
    """container에서 trades 배열 탐색."""
    if not isinstance(container, Mapping):
        return TradeLocation()

    if schema is not None:
        trades = container.get(schema.trades_key)
        if isinstance(trades, list):
            return TradeLocation(trades, STRATEGY_SCHEMA, schema.trades_key)

    for key, value in container.items():
        if isinstance(value, list) and isinstance(key, str) and _DEX_TRADE_KEY.search(key):
            return TradeLocation(value, STRATEGY_KEY, key)

    # Fallback: 키 이름이 예상과 다를 때 구조로 추정
    dex_path = (schema or GENERIC_SCHEMA).dex_path
    for key, value in container.items():
        if _looks_like_trades(value, dex_path):
            return TradeLocation(value, STRATEGY_STRUCTURAL, key)

    return TradeLocation()


def extract_trades(container: Any) -> list:
    """키 이름 → 구조 순으로 trades 배열 탐색. 없으면 []."""
    return locate_trades(container).trades

"""체인 응답 → NormalizedRow 목록.

입력은 GraphQL 응답의 `data` 객체 하나 (체인 1개분).
chain 이름은 호출자가 지정한다. 같은 쿼리가 여러 체인을 "EVM" 같은
모호한 key로 돌려주기 때문에 payload에서 추론하지 않는다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from normalizers.numeric import CoercionReport, Number, is_usable_number, to_number
from normalizers.protocol import normalize_protocol
from normalizers.trades import (
    GENERIC_SCHEMA,
    STRATEGY_STRUCTURAL,
    ProviderSchema,
    dig,
    locate_trades,
    select_schema,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizedRow:
    """(chain, protocol, version) 거래 활동 샘플 1건."""
    chain: str
    protocol: str
    version: Optional[str]
    count: Number
    trade_amount: float

    @property
    def key(self) -> tuple[str, str, Optional[str]]:
        return (self.chain, self.protocol, self.version)

    def to_dict(self) -> dict:
        return {
            "chain": self.chain,
            "protocol": self.protocol,
            "version": self.version,
            "count": self.count,
            "trade_amount": self.trade_amount,
        }


def _coerce_field(
    entry: Mapping[str, Any],
    field_name: str,
    chain: str,
    report: Optional[CoercionReport],
) -> Number:
    raw = entry.get(field_name)
    value = to_number(raw, fallback=None)
    # 변환 실패, 또는 숫자였지만 NaN/inf/음수/float 범위 초과
    if value is None or not is_usable_number(value):
        if report is not None:
            report.record(chain, field_name, raw)
        return 0
    return value


def normalize_chain_response(
    api_response_data: Any,
    chain_name: str,
    schemas: Mapping[str, ProviderSchema] | None = None,
    report: Optional[CoercionReport] = None,
) -> list[NormalizedRow]:
    """체인 1개 응답을 NormalizedRow 목록으로 변환.

    Args:
        api_response_data: GraphQL `data` 객체 (예: {"EVM": {"DEXTrades": [...]}}).
        chain_name: 정식 체인 이름 (예: "ethereum").
        schemas: discriminator → ProviderSchema. None이면 기본 변형.
        report: fallback 기록용 (선택).

    Returns:
        NormalizedRow 목록. 모양이 맞지 않으면 빈 목록.
    """
    if not isinstance(api_response_data, Mapping) or not api_response_data:
        return []

    # 응답은 항상 최상위 key 하나로 감싸져 있다 ("EVM" / "Solana")
    wrapper_key, container = next(iter(api_response_data.items()))
    if not isinstance(container, Mapping):
        return []

    schema = select_schema(wrapper_key, schemas)
    location = locate_trades(container, schema)
    if location.strategy == STRATEGY_STRUCTURAL:
        logger.debug(
            "[Normalizer] %s: 구조 추정으로 trades 배열 선택 (key=%s)",
            chain_name, location.key,
        )
    mapping = schema or GENERIC_SCHEMA

    rows: list[NormalizedRow] = []
    for entry in location.trades:
        if not isinstance(entry, Mapping):
            entry = {}
        protocol = normalize_protocol(dig(entry, mapping.dex_path), mapping.dex_fields)
        count = _coerce_field(entry, mapping.count_field, chain_name, report)
        amount = _coerce_field(entry, mapping.amount_field, chain_name, report)
        rows.append(NormalizedRow(
            chain=chain_name,
            protocol=protocol.name,
            version=protocol.version,
            count=count,
            trade_amount=float(amount),
        ))
    return rows

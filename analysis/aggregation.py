"""(chain, protocol, version) 단위 집계.

같은 key의 행은 count / trade_amount를 합산해 1행으로 만든다.
출력 순서는 key가 처음 등장한 순서 (정렬은 chain_analytics 담당).
version None과 ""는 다른 key다.
"""

from __future__ import annotations

import logging
import math
import sys
from dataclasses import replace
from typing import Iterable, Optional

from normalizers.chain_response import NormalizedRow
from normalizers.numeric import CoercionReport

logger = logging.getLogger(__name__)

# 집계 후에도 모양은 같다
AggregatedRow = NormalizedRow

# 합계가 float 범위를 넘으면 이 값으로 고정
MAX_TRADE_AMOUNT = sys.float_info.max


def _add_amount(
    current: AggregatedRow,
    amount: float,
    report: Optional[CoercionReport],
) -> float:
    total = current.trade_amount + amount
    if math.isfinite(total):
        return total
    if report is not None:
        report.warn(
            f"{current.chain}: {current.protocol} tradeAmount 합계 overflow → {MAX_TRADE_AMOUNT:.3e} 고정"
        )
    return MAX_TRADE_AMOUNT


def aggregate_by_chain_protocol(
    rows: Iterable[NormalizedRow],
    report: Optional[CoercionReport] = None,
) -> list[AggregatedRow]:
    """(chain, protocol, version) 기준 합산. 입력 행은 변경하지 않는다.

    Args:
        rows: 정규화된 행.
        report: 합계 overflow 기록용 (선택).
    """
    merged: dict[tuple, AggregatedRow] = {}
    total = 0
    for row in rows:
        total += 1
        current = merged.get(row.key)
        if current is None:
            merged[row.key] = row
        else:
            merged[row.key] = replace(
                current,
                count=current.count + row.count,
                trade_amount=_add_amount(current, row.trade_amount, report),
            )

    logger.debug("[Aggregator] %d행 → %d key", total, len(merged))
    return list(merged.values())

"""
Numeric coercion helpers.

Bitquery는 같은 필드를 체인/버전에 따라 숫자 또는 문자열로 내려준다
(count: 12345 / "12345", tradeAmount: "1234.56").
"""

import math
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

Number = Union[int, float]


def to_number(value: Any, fallback: Optional[Number] = 0) -> Optional[Number]:
    """숫자 또는 숫자 문자열을 숫자로 변환. 실패 시 fallback.

    이미 숫자인 값은 그대로 반환한다 (NaN 포함, 보정하지 않음).
    bool은 숫자로 취급하지 않는다.
    """
    if isinstance(value, bool):
        return fallback
    if isinstance(value, (int, float)):
        return value
    if not isinstance(value, str):
        return fallback

    text = value.strip()
    if not text or "_" in text:
        return fallback
    try:
        return int(text)
    except ValueError:
        pass
    try:
        parsed = float(text)
    except ValueError:
        return fallback
    if not math.isfinite(parsed):
        return fallback
    return parsed


def is_usable_number(value: Number) -> bool:
    """집계에 쓸 수 있는 값인지 (유한, 0 이상, float 범위 이내)."""
    try:
        return math.isfinite(value) and value >= 0
    except OverflowError:
        # float로 표현할 수 없는 정수
        return False


@dataclass
class CoercionReport:
    """fallback 적용 내역.

    조용히 0으로 대체되는 값을 세고, 값이 있었는데 못 쓴 경우는 경고 메시지로 남긴다.
    """
    fallbacks: int = 0
    warnings: List[str] = field(default_factory=list)

    def record(self, chain: str, field_name: str, raw: Any) -> None:
        self.fallbacks += 1
        if raw is not None:
            self.warnings.append(
                f"{chain}: {field_name}={raw!r} 변환 불가 → 0 처리"
            )

    def warn(self, message: str) -> None:
        """변환 외의 보정 (합계 overflow 등)."""
        self.fallbacks += 1
        self.warnings.append(message)

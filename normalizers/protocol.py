"""
Protocol name normalization helpers.

EVM: ProtocolFamily + ProtocolVersion ("Uniswap", "V3")
Solana: ProtocolFamily + ProtocolName ("Raydium", "raydium_clmm")
"""

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

UNKNOWN_PROTOCOL = "Unknown"

_VERSION_PREFIX = re.compile(r"^v", re.IGNORECASE)


@dataclass(frozen=True)
class DexFieldNames:
    """Dex 메타데이터 필드 이름 (provider 버전별로 다를 수 있음)."""
    family: str = "ProtocolFamily"
    version: str = "ProtocolVersion"
    name: str = "ProtocolName"


DEFAULT_DEX_FIELDS = DexFieldNames()


@dataclass(frozen=True)
class ProtocolName:
    name: str
    version: Optional[str] = None


def _clean(value: Any) -> Optional[str]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def normalize_protocol(
    dex: Optional[Mapping[str, Any]],
    fields: Optional[DexFieldNames] = None,
) -> ProtocolName:
    """Dex 메타데이터 → (name, version).

    우선순위:
      1. 메타데이터 없음 → Unknown
      2. family + version → version을 "v" 접두사로 통일 ("V3", "3" → "v3")
      3. family + family와 다른 name → name을 version 자리에 (Solana 하위 브랜드)
      4. family 또는 name, 둘 다 없으면 Unknown
    """
    if not isinstance(dex, Mapping):
        return ProtocolName(UNKNOWN_PROTOCOL)
    fields = fields or DEFAULT_DEX_FIELDS

    family = _clean(dex.get(fields.family))
    version = _clean(dex.get(fields.version))
    if version is not None:
        version = _VERSION_PREFIX.sub("", version, count=1) or None
    name = _clean(dex.get(fields.name))

    if family and version:
        return ProtocolName(family, f"v{version}")
    if family and name and name != family:
        return ProtocolName(family, name)
    return ProtocolName(family or name or UNKNOWN_PROTOCOL)


def format_protocol_label(name: str, version: Optional[str]) -> str:
    """표시용 라벨: "Uniswap (v3)" / "Uniswap"."""
    return f"{name} ({version})" if version else name

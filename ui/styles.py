"""UI 스타일 상수.

대시보드 카드 / 배지 / 차트 색상.
"""

# =============================================================================
# 기본 컬러 팔레트
# =============================================================================

COLORS = {
    # 상태 색상
    "success": "#22c55e",      # 초록 (전체 체인 정상)
    "warning": "#f59e0b",      # 주황 (일부 체인 실패)
    "danger": "#ef4444",       # 빨강 (전체 실패)
    "info": "#3b82f6",         # 파랑 (정보)
    "neutral": "#6b7280",      # 회색 (중립)
    # 배경/테두리
    "card_bg": "rgba(255,255,255,0.03)",
    "card_border": "rgba(255,255,255,0.08)",
    # 텍스트
    "text_primary": "#fff",
    "text_secondary": "#a0a0a0",
    "text_muted": "#6b7280",
    "text_accent": "#00d4ff",
}

# 체인별 차트 색상
CHAIN_COLORS = {
    "ethereum": "#627eea",
    "bsc": "#f3ba2f",
    "arbitrum": "#28a0f0",
    "base": "#0052ff",
    "solana": "#9945ff",
}

# =============================================================================
# 공통 스타일 상수
# =============================================================================

# 카드 컨테이너
CARD_STYLE = (
    f"background:{COLORS['card_bg']};"
    f"border:1px solid {COLORS['card_border']};"
    "border-radius:12px;padding:1rem;margin-bottom:0.75rem;"
)


def badge_style(bg_color: str, text_color: str = "#fff", size: str = "0.75rem") -> str:
    """배지 인라인 스타일 생성."""
    return (
        f"background:{bg_color};color:{text_color};"
        f"padding:2px 8px;border-radius:4px;font-size:{size};"
    )


def chain_badge(chain: str, label: str | None = None) -> str:
    """체인 배지 HTML 생성."""
    bg = CHAIN_COLORS.get(chain, COLORS["neutral"])
    return f'<span style="{badge_style(bg)};font-weight:600;">{label or chain}</span>'

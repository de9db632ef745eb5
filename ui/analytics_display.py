"""분석 결과 판정 + Streamlit 렌더링.

커버리지 판정 규칙:
  RED:    모든 체인 조회 실패
  YELLOW: 일부 체인 조회 실패 | 숫자 변환 fallback 발생
  GREEN:  정상

렌더링 함수는 streamlit 모듈을 인자로 받는다 (테스트에서 mock 가능).
"""

from __future__ import annotations

import json
import logging
from typing import Sequence

import pandas as pd
import plotly.graph_objects as go

from analysis.chain_analytics import AnalyticsResult, BlockchainSummary
from normalizers.chain_map import display_chain
from ui.styles import CARD_STYLE, CHAIN_COLORS, COLORS, chain_badge

logger = logging.getLogger(__name__)

_CHART_TOP_N = 10


def format_volume(volume: float) -> str:
    """거래량 포맷팅"""
    if volume >= 1_000_000_000:
        return f"${volume / 1_000_000_000:.2f}B"
    elif volume >= 1_000_000:
        return f"${volume / 1_000_000:.2f}M"
    elif volume >= 1_000:
        return f"${volume / 1_000:.2f}K"
    return f"${volume:.2f}"


def evaluate_coverage(result: AnalyticsResult) -> tuple[str, list[str]]:
    """커버리지 판정.

    Args:
        result: compute_analytics 결과.

    Returns:
        (status, issues) where status is "RED"/"YELLOW"/"GREEN".
    """
    issues: list[str] = []
    total = len(result.blockchains)

    if total and len(result.failed_chains) >= total:
        issues.append("모든 체인 조회 실패")
        return "RED", issues

    if result.partial:
        failed = ", ".join(display_chain(c) for c in result.failed_chains)
        issues.append(f"일부 체인 데이터 없음: {failed}")

    if result.coercion_fallbacks:
        issues.append(f"숫자 변환 fallback {result.coercion_fallbacks:,}건")

    if issues:
        return "YELLOW", issues

    return "GREEN", []


def protocol_frame(summary: BlockchainSummary) -> pd.DataFrame:
    """체인 1개의 프로토콜 순위 테이블."""
    return pd.DataFrame(
        [
            {
                "Rank": rank,
                "Protocol": p.label,
                "Volume (USD)": p.volume,
                "Transactions": p.transactions,
            }
            for rank, p in enumerate(summary.leading_protocols, start=1)
        ],
        columns=["Rank", "Protocol", "Volume (USD)", "Transactions"],
    )


def aggregated_frame(result: AnalyticsResult) -> pd.DataFrame:
    """전체 체인의 집계 테이블 (거래량 내림차순)."""
    records = [
        {
            "Blockchain": chain,
            "Protocol": p.name,
            "Version": p.version or "",
            "Volume (USD)": p.volume,
            "Transactions": p.transactions,
        }
        for chain, summary in result.blockchains.items()
        for p in summary.leading_protocols
    ]
    frame = pd.DataFrame(
        records,
        columns=["Blockchain", "Protocol", "Version", "Volume (USD)", "Transactions"],
    )
    return frame.sort_values("Volume (USD)", ascending=False, kind="stable").reset_index(drop=True)


def protocol_bar_chart(summary: BlockchainSummary, top_n: int = _CHART_TOP_N) -> go.Figure:
    """상위 프로토콜 거래량 막대 차트."""
    top = summary.leading_protocols[:top_n]
    fig = go.Figure(
        go.Bar(
            x=[p.volume for p in top],
            y=[p.label for p in top],
            orientation="h",
            marker_color=CHAIN_COLORS.get(summary.network, COLORS["info"]),
        )
    )
    fig.update_layout(
        height=max(200, 32 * len(top) + 80),
        margin=dict(l=0, r=0, t=30, b=0),
        title=f"{display_chain(summary.network)}: Top {len(top)} protocols",
        yaxis=dict(autorange="reversed"),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
    )
    return fig


def render_coverage_banner(st_module, result: AnalyticsResult) -> None:
    """커버리지 배너 렌더링.

    Args:
        st_module: streamlit 모듈 (import st).
        result: 분석 결과.
    """
    status, issues = evaluate_coverage(result)
    logger.info("[Coverage] status=%s, issues=%s", status, issues)

    if status == "RED":
        st_module.error(f"🔴 데이터 없음: {' | '.join(issues)}")
    elif status == "YELLOW":
        st_module.warning(f"🟡 부분 결과: {' | '.join(issues)}")
    else:
        st_module.success("🟢 모든 체인 조회 완료")


def render_overall(st_module, result: AnalyticsResult, period_label: str = "") -> None:
    """전체 요약 카드 4개."""
    overall = result.overall
    cols = st_module.columns(4)
    cols[0].metric("Top Blockchain", display_chain(overall.top_blockchain) or "-")
    cols[1].metric("Leading Protocol", overall.leading_protocol)
    cols[2].metric("Total Volume", format_volume(overall.total_volume))
    cols[3].metric("Transactions", f"{overall.total_transactions:,}")
    if period_label:
        st_module.caption(period_label)


def render_chain_breakdown(
    st_module,
    result: AnalyticsResult,
    chains: Sequence[str],
) -> None:
    """체인별 상세 (합계 + 프로토콜 테이블 + 차트)."""
    for chain in chains:
        summary = result.blockchains.get(chain)
        if summary is None:
            continue

        st_module.markdown(
            f'<div style="{CARD_STYLE}">{chain_badge(chain, display_chain(chain))}'
            f' <span style="color:{COLORS["text_secondary"]};">'
            f'{format_volume(summary.total_volume)} · '
            f'{summary.total_transactions:,} tx</span></div>',
            unsafe_allow_html=True,
        )

        if chain in result.failed_chains:
            st_module.caption("조회 실패 (데이터 없음)")
            continue
        if not summary.leading_protocols:
            st_module.caption("거래 데이터 없음")
            continue

        left, right = st_module.columns([3, 2])
        with left:
            st_module.dataframe(protocol_frame(summary), hide_index=True, use_container_width=True)
        with right:
            st_module.plotly_chart(protocol_bar_chart(summary), use_container_width=True)


def render_data_grid(st_module, result: AnalyticsResult) -> None:
    """집계 데이터 전체 테이블."""
    with st_module.expander("📋 Aggregated Blockchain Data"):
        st_module.caption("분석에 사용된 집계 데이터 (거래량 내림차순)")
        st_module.dataframe(aggregated_frame(result), hide_index=True, use_container_width=True)


def render_debug_panel(st_module, raw_responses: dict, latency_stats: dict, warnings: list[str]) -> None:
    """원본 응답 / 조회 속도 / fallback 경고."""
    with st_module.expander("🔧 API Debug"):
        st_module.code(json.dumps(latency_stats, ensure_ascii=False, indent=2), language="json")
        for msg in warnings:
            st_module.text(msg)
        if not raw_responses:
            st_module.text("No API responses yet")
        for chain, response in raw_responses.items():
            st_module.markdown(f"**{display_chain(chain)}**")
            st_module.code(
                json.dumps(response, ensure_ascii=False, indent=2, default=str)[:20_000],
                language="json",
            )

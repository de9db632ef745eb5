"""
DEX Chain Analytics Dashboard

Bitquery DEX 거래량을 체인 / 프로토콜별로 집계해 순위를 보여준다.
실행: streamlit run app.py
"""

import streamlit as st
import asyncio
import os
import sys
import logging
from pathlib import Path

# ============================================================
# 로깅 설정 (stderr)
# ============================================================
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s | %(levelname)s | %(name)s | %(message)s',
    handlers=[logging.StreamHandler(sys.stderr)],
)
logger = logging.getLogger("dex-analytics")

from collectors.chain_config import AnalyticsConfig, load_config
from pipelines.analytics_pipeline import AnalyticsPipeline, AnalyticsRun
from ui.analytics_display import (
    render_chain_breakdown,
    render_coverage_banner,
    render_data_grid,
    render_debug_panel,
    render_overall,
)

_CONFIG_PATH = Path(os.environ.get("ANALYTICS_CONFIG", Path(__file__).resolve().parent / "config.yaml"))
_CACHE_TTL = 300  # 5분


@st.cache_resource
def get_config() -> AnalyticsConfig:
    """config.yaml 로드 (앱 시작 시 1회)."""
    config = AnalyticsConfig.from_dict(load_config(_CONFIG_PATH))
    logger.info(f"[Config] chains={config.chains}, timeout={config.timeout_sec}s")
    return config


@st.cache_data(ttl=_CACHE_TTL, show_spinner=False)
def run_pipeline(api_key: str) -> AnalyticsRun:
    """파이프라인 1회 실행 (API 키별 5분 캐시)."""
    pipeline = AnalyticsPipeline(get_config())
    return asyncio.run(pipeline.run(api_key))


st.set_page_config(
    page_title="DEX Chain Analytics",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="collapsed",
)

config = get_config()

st.title("📊 DEX Chain Analytics")
st.caption(
    f"{len(config.chains)}개 체인 ({', '.join(config.chains)}) DEX 거래량 / 프로토콜 순위"
)

# API 키: 세션 동안만 유지 (저장하지 않음)
api_key = st.text_input(
    "Bitquery API Key",
    value=os.environ.get(config.api_key_env, ""),
    type="password",
)

refresh = st.button("🔄 Refresh All", disabled=not api_key)
if refresh:
    run_pipeline.clear()

if not api_key:
    st.info("Bitquery API 키를 입력하세요.")
    st.stop()

with st.spinner("체인별 데이터 조회 중..."):
    try:
        run = run_pipeline(api_key)
    except ValueError as e:
        logger.error(f"[App] 파이프라인 실패: {e}")
        st.error(f"조회 실패: {e}")
        st.stop()

result = run.result
period = run.period
period_label = (
    f"Period: {period.period} ({period.start_date} - {period.end_date})" if period else ""
)

render_coverage_banner(st, result)
render_overall(st, result, period_label)

st.subheader("Data Breakdown")
render_chain_breakdown(st, result, config.chains)
render_data_grid(st, result)
render_debug_panel(st, run.raw_responses, run.latency_stats, result.warnings)

"""Streamlit 대시보드 렌더링 모듈."""

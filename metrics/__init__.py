"""조회 속도 측정 모듈."""

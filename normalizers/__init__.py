"""Bitquery 응답 정규화 모듈.

Modules:
- numeric: 숫자 강제 변환 (fallback 기록)
- protocol: 프로토콜 이름/버전 정규화
- trades: 체인별 응답에서 DEXTrades 배열 탐색
- chain_response: 체인 응답 → NormalizedRow 목록
- chain_map: 체인 별칭/Bitquery network 매핑
"""

#!/usr/bin/env python3
"""
DEX Chain Analytics
체인 / 프로토콜별 DEX 거래량 순위 (Bitquery)

사용법:
    python main.py                      # 전체 체인 1회 조회
    python main.py --chain solana       # 특정 체인만
    python main.py --json               # JSON 출력
"""

import asyncio
import argparse
import json
import logging
import sys
from pathlib import Path

# Windows 콘솔 UTF-8 설정
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding='utf-8')
    sys.stderr.reconfigure(encoding='utf-8')

from analysis.chain_analytics import AnalyticsResult
from collectors.api_client import get_api_key
from collectors.chain_config import AnalyticsConfig, load_config
from normalizers.chain_map import display_chain
from pipelines.analytics_pipeline import AnalyticsPipeline, AnalyticsRun
from ui.analytics_display import format_volume


# 로깅 설정
def setup_logging(config: dict):
    log_config = config.get("logging", {})
    level = getattr(logging, log_config.get("level", "INFO"))

    # 로그 디렉토리 생성
    log_file = log_config.get("file")
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%H:%M:%S",
        handlers=handlers,
    )


def print_result(result: AnalyticsResult, chains: list[str], period_label: str = ""):
    """결과 출력"""
    overall = result.overall

    print("\n" + "=" * 60)
    print("  DEX CHAIN ANALYTICS")
    if period_label:
        print(f"  {period_label}")
    print("=" * 60)

    print(f"\n  1위 체인:       {display_chain(overall.top_blockchain) or '-'}")
    print(f"  1위 프로토콜:   {overall.leading_protocol}")
    print(f"  총 거래량:      {format_volume(overall.total_volume)}")
    print(f"  총 거래 수:     {overall.total_transactions:,}")

    for chain in chains:
        summary = result.blockchains.get(chain)
        if summary is None:
            continue

        print(f"\n  [{display_chain(chain)}] {format_volume(summary.total_volume)} | {summary.total_transactions:,} tx")
        if chain in result.failed_chains:
            print("    조회 실패")
            continue

        print(f"  {'#':<4} {'프로토콜':<28} {'거래량(USD)':<15} {'거래 수':<10}")
        print("  " + "-" * 56)
        for rank, p in enumerate(summary.leading_protocols, start=1):
            print(f"  {rank:<4} {p.label:<28} {format_volume(p.volume):<15} {p.transactions:,}")

    print("=" * 60)

    if result.partial:
        print(f"\n⚠️  부분 결과: {', '.join(result.failed_chains)} 데이터 없음")
    if result.coercion_fallbacks:
        print(f"⚠️  숫자 변환 fallback {result.coercion_fallbacks}건")


def print_json(run: AnalyticsRun):
    """JSON 출력"""
    print(json.dumps(run.result.to_dict(), ensure_ascii=False, indent=2))


async def main():
    parser = argparse.ArgumentParser(description="DEX Chain Analytics")
    parser.add_argument("--config", type=str, default="config.yaml", help="설정 파일 경로")
    parser.add_argument("--api-key", type=str, help="Bitquery API 키 (기본: 환경변수)")
    parser.add_argument("--chain", action="append", help="특정 체인만 조회 (반복 가능)")
    parser.add_argument("--json", action="store_true", help="JSON 출력")
    args = parser.parse_args()

    # 설정 로드
    config_path = Path(args.config)
    if not config_path.is_absolute() and not config_path.exists():
        config_path = Path(__file__).parent / args.config
    try:
        raw_config = load_config(config_path)
    except FileNotFoundError as e:
        print(e)
        sys.exit(1)

    setup_logging(raw_config)

    try:
        config = AnalyticsConfig.from_dict(raw_config)
        if args.chain:
            config = config.restrict(args.chain)
        api_key = args.api_key or get_api_key(config.api_key_env, required=True)
    except ValueError as e:
        print(f"설정 오류: {e}")
        sys.exit(1)

    run = await AnalyticsPipeline(config).run(api_key)

    if args.json:
        print_json(run)
    else:
        period = run.period
        label = f"{period.period} ({period.start_date} - {period.end_date})" if period else ""
        print_result(run.result, config.chains, label)


if __name__ == "__main__":
    asyncio.run(main())

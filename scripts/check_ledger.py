#!/usr/bin/env python3
"""원장 상태 확인 스크립트

설정 파일의 저장소를 열어 계정별 잔액, 전표 통계, 최근 전표를 출력.
"""

import argparse
import asyncio
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.config.loader import get_settings
from core.ledger.service import open_ledger
from core.utils.money import format_amount


async def main(config_path: Path | None, recent: int) -> None:
    settings = get_settings(config_path)
    ledger = await open_ledger(settings)

    try:
        print("=" * 60)
        print(f"저장소: {settings.storage} ({settings.db_path})")
        print("=" * 60)

        print("\n[1] 계정별 잔액:")
        for summary in await ledger.head_summaries():
            head = summary.head
            print(
                f"  {head.kind.value:8} | {head.name:20} | "
                f"{format_amount(summary.balance):>15}"
            )

        stats = await ledger.compute_stats()
        print("\n[2] 전표 통계:")
        print(f"  활성 전표: {stats.total_transactions}")
        print(f"  삭제된 전표: {stats.inactive_count}")
        print(f"  입금 합계: {format_amount(stats.total_receive)}")
        print(f"  지급 합계: {format_amount(stats.total_payment)}")

        result = await ledger.query_vouchers(page=1, page_size=recent)
        print(f"\n[3] 최근 전표 ({len(result.rows)}/{result.total_count}):")
        for voucher in result.rows:
            print(
                f"  {voucher.voucher_number} | {voucher.date.isoformat()} | "
                f"{voucher.voucher_type.value:16} | {format_amount(voucher.amount):>12}"
            )
    finally:
        await ledger.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="원장 상태 확인")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="settings.yaml 경로 (기본: config/settings.yaml)",
    )
    parser.add_argument(
        "--recent",
        type=int,
        default=10,
        help="출력할 최근 전표 수",
    )
    args = parser.parse_args()
    asyncio.run(main(args.config, args.recent))

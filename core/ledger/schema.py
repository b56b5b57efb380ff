"""
원장 스키마 초기화

엔진/Web 시작 시 자동으로 원장 테이블과 인덱스 생성.
CREATE IF NOT EXISTS 패턴으로 안전하게 동작.

주의: 금액은 TEXT로 저장 (Decimal 정밀도 유지)
"""

import logging
from typing import TYPE_CHECKING

import aiosqlite

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


async def init_ledger_schema(db: "SQLiteAdapter") -> None:
    """원장 스키마 초기화 (테이블 + 인덱스 + 메타 행)

    이미 존재하는 경우 안전하게 건너뜀 (IF NOT EXISTS).
    하나의 쓰기 트랜잭션으로 실행.

    Args:
        db: SQLiteAdapter 인스턴스
    """
    async with db.transaction() as conn:
        await _create_ledger_tables(conn)
        await _create_ledger_indexes(conn)
        await _insert_ledger_meta(conn)
    logger.info("원장 스키마 초기화 완료")


async def _create_ledger_tables(db: aiosqlite.Connection) -> None:
    """원장 테이블 생성"""

    # account_head 테이블
    await db.execute("""
        CREATE TABLE IF NOT EXISTS account_head (
            head_id          TEXT PRIMARY KEY,
            name             TEXT NOT NULL,
            kind             TEXT NOT NULL,
            status           TEXT NOT NULL DEFAULT 'active',
            created_at       TEXT NOT NULL
        )
    """)

    # party 테이블
    await db.execute("""
        CREATE TABLE IF NOT EXISTS party (
            party_id         TEXT PRIMARY KEY,
            name             TEXT NOT NULL,
            phone            TEXT,
            address          TEXT,
            party_type       TEXT,
            status           TEXT NOT NULL DEFAULT 'active',
            created_at       TEXT NOT NULL
        )
    """)

    # voucher 테이블
    await db.execute("""
        CREATE TABLE IF NOT EXISTS voucher (
            voucher_id       TEXT PRIMARY KEY,
            voucher_number   TEXT NOT NULL UNIQUE,
            sequence         INTEGER NOT NULL UNIQUE,
            voucher_date     TEXT NOT NULL,
            voucher_type     TEXT NOT NULL,
            party_id         TEXT REFERENCES party(party_id),
            from_head_type   TEXT NOT NULL,
            from_head_id     TEXT NOT NULL REFERENCES account_head(head_id),
            to_head_type     TEXT,
            to_head_id       TEXT REFERENCES account_head(head_id),
            description      TEXT NOT NULL DEFAULT '',
            amount           TEXT NOT NULL,
            status           TEXT NOT NULL DEFAULT 'active',
            created_by       TEXT NOT NULL,
            created_at       TEXT NOT NULL,
            updated_at       TEXT
        )
    """)

    # ledger_meta 테이블 (시퀀스, 리비전 카운터)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS ledger_meta (
            meta_key         TEXT PRIMARY KEY,
            meta_value       INTEGER NOT NULL DEFAULT 0
        )
    """)


async def _create_ledger_indexes(db: aiosqlite.Connection) -> None:
    """인덱스 생성"""

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_voucher_date
        ON voucher(voucher_date DESC, sequence DESC)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_voucher_from_head
        ON voucher(from_head_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_voucher_to_head
        ON voucher(to_head_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_voucher_party
        ON voucher(party_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_account_head_kind
        ON account_head(kind, status)
    """)

    # 활성 계정 이름 유일성 (같은 kind, 대소문자 무시)
    await db.execute("""
        CREATE UNIQUE INDEX IF NOT EXISTS ux_account_head_active_name
        ON account_head(kind, lower(name))
        WHERE status = 'active'
    """)


async def _insert_ledger_meta(db: aiosqlite.Connection) -> None:
    """메타 카운터 초기 행 삽입"""
    for key in ("voucher_sequence", "revision"):
        await db.execute(
            "INSERT OR IGNORE INTO ledger_meta (meta_key, meta_value) VALUES (?, 0)",
            (key,),
        )

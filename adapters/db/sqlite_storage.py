"""
SQLite 원장 저장소

ILedgerStorage Protocol의 영속 구현.
무결성 검사 + 시퀀스 할당 + 쓰기 + 리비전 증가를 하나의 트랜잭션으로 처리.
"""

import logging
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable

import aiosqlite

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.integrity import (
    check_head_deletable,
    check_head_kind_changeable,
    check_party_deletable,
    check_party_reference,
    check_unique_head_name,
    check_voucher_editable,
    check_voucher_references,
    duplicate_head_name,
)
from core.domain.models import EDITABLE_VOUCHER_FIELDS, AccountHead, Party, Voucher
from core.ledger.schema import init_ledger_schema
from core.types import HeadKind, RecordStatus, VoucherType
from core.utils.dates import parse_timestamp

logger = logging.getLogger(__name__)

_HEAD_COLUMNS = "head_id, name, kind, status, created_at"
_PARTY_COLUMNS = "party_id, name, phone, address, party_type, status, created_at"
_VOUCHER_COLUMNS = """
    voucher_id, voucher_number, sequence, voucher_date, voucher_type,
    party_id, from_head_type, from_head_id, to_head_type, to_head_id,
    description, amount, status, created_by, created_at, updated_at
"""
_PARTY_FIELDS = ("name", "phone", "address", "party_type")


async def _select_one(
    conn: aiosqlite.Connection,
    sql: str,
    parameters: tuple[Any, ...] = (),
) -> tuple[Any, ...] | None:
    cursor = await conn.execute(sql, parameters)
    return await cursor.fetchone()


class SQLiteLedgerStorage:
    """SQLite 원장 저장소

    ILedgerStorage Protocol 구현.
    모든 쓰기는 SQLiteAdapter.transaction() 안에서 최신 행을 다시 읽어
    검증한 뒤 기록. 계정 이름 유일성은 부분 유니크 인덱스로도 보장.

    Args:
        db: 연결된 SQLiteAdapter

    사용 예시:
    ```python
    storage = await SQLiteLedgerStorage.open(Paths.LEDGER_DB)
    try:
        service = LedgerService(storage)
        ...
    finally:
        await storage.close()
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    @classmethod
    async def open(cls, db_path: Path | str) -> "SQLiteLedgerStorage":
        """DB 연결 + 스키마 초기화 후 저장소 반환"""
        db = SQLiteAdapter(db_path)
        await db.connect()
        await init_ledger_schema(db)
        return cls(db)

    async def close(self) -> None:
        await self.db.close()

    async def revision(self) -> int:
        row = await self.db.fetchone(
            "SELECT meta_value FROM ledger_meta WHERE meta_key = 'revision'"
        )
        return int(row[0]) if row else 0

    async def _bump(self, conn: aiosqlite.Connection) -> None:
        await conn.execute(
            "UPDATE ledger_meta SET meta_value = meta_value + 1 WHERE meta_key = 'revision'"
        )

    # -------------------------------------------------------------------------
    # 트랜잭션 내 조회
    # -------------------------------------------------------------------------

    async def _load_head(self, conn: aiosqlite.Connection, head_id: str | None) -> AccountHead | None:
        if head_id is None:
            return None
        row = await _select_one(
            conn, f"SELECT {_HEAD_COLUMNS} FROM account_head WHERE head_id = ?", (head_id,)
        )
        return self._row_to_head(row) if row else None

    async def _load_party(self, conn: aiosqlite.Connection, party_id: str | None) -> Party | None:
        if party_id is None:
            return None
        row = await _select_one(
            conn, f"SELECT {_PARTY_COLUMNS} FROM party WHERE party_id = ?", (party_id,)
        )
        return self._row_to_party(row) if row else None

    async def _active_heads(self, conn: aiosqlite.Connection, kind: HeadKind) -> list[AccountHead]:
        cursor = await conn.execute(
            f"SELECT {_HEAD_COLUMNS} FROM account_head WHERE kind = ? AND status = ?",
            (kind.value, RecordStatus.ACTIVE.value),
        )
        return [self._row_to_head(row) for row in await cursor.fetchall()]

    async def _reference_count(self, conn: aiosqlite.Connection, sql: str, params: tuple[Any, ...]) -> int:
        row = await _select_one(conn, sql, params)
        return int(row[0]) if row else 0

    async def _head_references(self, conn: aiosqlite.Connection, head_id: str) -> int:
        return await self._reference_count(
            conn,
            "SELECT COUNT(*) FROM voucher WHERE from_head_id = ? OR to_head_id = ?",
            (head_id, head_id),
        )

    async def _party_references(self, conn: aiosqlite.Connection, party_id: str) -> int:
        return await self._reference_count(
            conn,
            "SELECT COUNT(*) FROM voucher WHERE party_id = ?",
            (party_id,),
        )

    async def _write_head(self, conn: aiosqlite.Connection, head: AccountHead) -> None:
        """이름/종류 기록 (다른 프로세스와 경합 시 유니크 인덱스 위반을 중복 오류로 변환)"""
        try:
            await conn.execute(
                "UPDATE account_head SET name = ?, kind = ? WHERE head_id = ?",
                (head.name, head.kind.value, head.id),
            )
        except aiosqlite.IntegrityError as e:
            raise duplicate_head_name(head.name, head.kind) from e

    # -------------------------------------------------------------------------
    # 계정
    # -------------------------------------------------------------------------

    async def insert_head(self, head: AccountHead) -> None:
        async with self.db.transaction() as conn:
            if head.is_active:
                check_unique_head_name(head.name, head.kind, await self._active_heads(conn, head.kind))
            try:
                await conn.execute(
                    f"INSERT INTO account_head ({_HEAD_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
                    (
                        head.id,
                        head.name,
                        head.kind.value,
                        head.status.value,
                        head.created_at.isoformat(),
                    ),
                )
            except aiosqlite.IntegrityError as e:
                raise duplicate_head_name(head.name, head.kind) from e
            await self._bump(conn)

    async def rename_head(self, head_id: str, name: str) -> AccountHead:
        async with self.db.transaction() as conn:
            head = await self._load_head(conn, head_id)
            if head is None:
                raise KeyError(head_id)
            if head.is_active:
                check_unique_head_name(name, head.kind, await self._active_heads(conn, head.kind), head_id)

            updated = replace(head, name=name)
            await self._write_head(conn, updated)
            await self._bump(conn)
        return updated

    async def change_head_kind(self, head_id: str, kind: HeadKind) -> AccountHead:
        async with self.db.transaction() as conn:
            head = await self._load_head(conn, head_id)
            if head is None:
                raise KeyError(head_id)
            if head.kind == kind:
                return head

            check_head_kind_changeable(await self._head_references(conn, head_id))
            if head.is_active:
                check_unique_head_name(head.name, kind, await self._active_heads(conn, kind), head_id)

            updated = replace(head, kind=kind)
            await self._write_head(conn, updated)
            await self._bump(conn)
        return updated

    async def deactivate_head(self, head_id: str) -> bool:
        async with self.db.transaction() as conn:
            head = await self._load_head(conn, head_id)
            if head is None:
                raise KeyError(head_id)
            check_head_deletable(await self._head_references(conn, head_id))
            if not head.is_active:
                return False

            await conn.execute(
                "UPDATE account_head SET status = ? WHERE head_id = ?",
                (RecordStatus.INACTIVE.value, head_id),
            )
            await self._bump(conn)
        return True

    async def get_head(self, head_id: str) -> AccountHead | None:
        row = await self.db.fetchone(
            f"SELECT {_HEAD_COLUMNS} FROM account_head WHERE head_id = ?",
            (head_id,),
        )
        return self._row_to_head(row) if row else None

    async def list_heads(
        self,
        kind: HeadKind | None = None,
        include_inactive: bool = False,
    ) -> list[AccountHead]:
        conditions: list[str] = []
        params: list[Any] = []
        if kind is not None:
            conditions.append("kind = ?")
            params.append(kind.value)
        if not include_inactive:
            conditions.append("status = ?")
            params.append(RecordStatus.ACTIVE.value)

        sql = f"SELECT {_HEAD_COLUMNS} FROM account_head"
        if conditions:
            sql += " WHERE " + " AND ".join(conditions)

        rows = await self.db.fetchall(sql, tuple(params))
        return [self._row_to_head(row) for row in rows]

    async def count_head_references(self, head_id: str) -> int:
        row = await self.db.fetchone(
            "SELECT COUNT(*) FROM voucher WHERE from_head_id = ? OR to_head_id = ?",
            (head_id, head_id),
        )
        return int(row[0]) if row else 0

    # -------------------------------------------------------------------------
    # 거래처
    # -------------------------------------------------------------------------

    async def insert_party(self, party: Party) -> None:
        async with self.db.transaction() as conn:
            await conn.execute(
                f"INSERT INTO party ({_PARTY_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    party.id,
                    party.name,
                    party.phone,
                    party.address,
                    party.party_type,
                    party.status.value,
                    party.created_at.isoformat(),
                ),
            )
            await self._bump(conn)

    async def update_party(self, party_id: str, changes: dict[str, str | None]) -> Party:
        unknown = set(changes) - set(_PARTY_FIELDS)
        if unknown:
            raise ValueError(f"거래처 갱신 불가 필드: {sorted(unknown)}")

        async with self.db.transaction() as conn:
            party = await self._load_party(conn, party_id)
            if party is None:
                raise KeyError(party_id)

            updated = replace(party, **changes)
            await conn.execute(
                "UPDATE party SET name = ?, phone = ?, address = ?, party_type = ? WHERE party_id = ?",
                (updated.name, updated.phone, updated.address, updated.party_type, party_id),
            )
            await self._bump(conn)
        return updated

    async def deactivate_party(self, party_id: str, require_unreferenced: bool = False) -> bool:
        async with self.db.transaction() as conn:
            party = await self._load_party(conn, party_id)
            if party is None:
                raise KeyError(party_id)
            if require_unreferenced:
                check_party_deletable(await self._party_references(conn, party_id))
            if not party.is_active:
                return False

            await conn.execute(
                "UPDATE party SET status = ? WHERE party_id = ?",
                (RecordStatus.INACTIVE.value, party_id),
            )
            await self._bump(conn)
        return True

    async def get_party(self, party_id: str) -> Party | None:
        row = await self.db.fetchone(
            f"SELECT {_PARTY_COLUMNS} FROM party WHERE party_id = ?",
            (party_id,),
        )
        return self._row_to_party(row) if row else None

    async def list_parties(self, include_inactive: bool = False) -> list[Party]:
        if include_inactive:
            rows = await self.db.fetchall(f"SELECT {_PARTY_COLUMNS} FROM party")
        else:
            rows = await self.db.fetchall(
                f"SELECT {_PARTY_COLUMNS} FROM party WHERE status = ?",
                (RecordStatus.ACTIVE.value,),
            )
        return [self._row_to_party(row) for row in rows]

    async def count_party_references(self, party_id: str) -> int:
        row = await self.db.fetchone(
            "SELECT COUNT(*) FROM voucher WHERE party_id = ?",
            (party_id,),
        )
        return int(row[0]) if row else 0

    # -------------------------------------------------------------------------
    # 전표
    # -------------------------------------------------------------------------

    async def append_voucher(self, build: Callable[[int], Voucher]) -> Voucher:
        async with self.db.transaction() as conn:
            await conn.execute(
                "UPDATE ledger_meta SET meta_value = meta_value + 1 "
                "WHERE meta_key = 'voucher_sequence'"
            )
            row = await _select_one(
                conn, "SELECT meta_value FROM ledger_meta WHERE meta_key = 'voucher_sequence'"
            )
            voucher = build(int(row[0]))

            # 검증 실패 시 롤백되어 시퀀스를 소비하지 않음
            check_voucher_references(
                voucher,
                await self._load_head(conn, voucher.from_head_id),
                await self._load_head(conn, voucher.to_head_id),
                await self._load_party(conn, voucher.party_id),
            )

            await conn.execute(
                f"""
                INSERT INTO voucher ({_VOUCHER_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                self._voucher_params(voucher),
            )
            await self._bump(conn)

        logger.debug(
            "전표 저장 완료",
            extra={"voucher_id": voucher.id, "voucher_number": voucher.voucher_number},
        )
        return voucher

    async def update_voucher(
        self,
        voucher_id: str,
        changes: dict[str, Any],
        updated_at: datetime,
    ) -> Voucher:
        unknown = set(changes) - EDITABLE_VOUCHER_FIELDS
        if unknown:
            raise ValueError(f"전표 갱신 불가 필드: {sorted(unknown)}")

        async with self.db.transaction() as conn:
            row = await _select_one(
                conn, f"SELECT {_VOUCHER_COLUMNS} FROM voucher WHERE voucher_id = ?", (voucher_id,)
            )
            if row is None:
                raise KeyError(voucher_id)
            voucher = self._row_to_voucher(row)
            check_voucher_editable(voucher)

            party_id = changes.get("party_id", voucher.party_id)
            if party_id is not None and party_id != voucher.party_id:
                check_party_reference(await self._load_party(conn, party_id), party_id)

            updated = replace(voucher, updated_at=updated_at, **changes)
            # 상태/참조 컬럼은 기록하지 않음
            await conn.execute(
                """
                UPDATE voucher
                SET voucher_date = ?, party_id = ?, description = ?, amount = ?, updated_at = ?
                WHERE voucher_id = ? AND status = ?
                """,
                (
                    updated.date.isoformat(),
                    updated.party_id,
                    updated.description,
                    str(updated.amount),
                    updated_at.isoformat(),
                    voucher_id,
                    RecordStatus.ACTIVE.value,
                ),
            )
            await self._bump(conn)
        return updated

    async def get_voucher(self, voucher_id: str) -> Voucher | None:
        row = await self.db.fetchone(
            f"SELECT {_VOUCHER_COLUMNS} FROM voucher WHERE voucher_id = ?",
            (voucher_id,),
        )
        return self._row_to_voucher(row) if row else None

    async def set_voucher_status(
        self,
        voucher_id: str,
        status: RecordStatus,
        updated_at: datetime,
    ) -> bool:
        async with self.db.transaction() as conn:
            row = await _select_one(
                conn, "SELECT status FROM voucher WHERE voucher_id = ?", (voucher_id,)
            )
            if row is None:
                raise KeyError(voucher_id)
            if row[0] == status.value:
                return False

            await conn.execute(
                "UPDATE voucher SET status = ?, updated_at = ? WHERE voucher_id = ?",
                (status.value, updated_at.isoformat(), voucher_id),
            )
            await self._bump(conn)
        return True

    async def list_vouchers(self) -> list[Voucher]:
        rows = await self.db.fetchall(f"SELECT {_VOUCHER_COLUMNS} FROM voucher")
        return [self._row_to_voucher(row) for row in rows]

    # -------------------------------------------------------------------------
    # 행 변환
    # -------------------------------------------------------------------------

    @staticmethod
    def _voucher_params(voucher: Voucher) -> tuple[Any, ...]:
        return (
            voucher.id,
            voucher.voucher_number,
            voucher.sequence,
            voucher.date.isoformat(),
            voucher.voucher_type.value,
            voucher.party_id,
            voucher.from_head_type.value,
            voucher.from_head_id,
            voucher.to_head_type.value if voucher.to_head_type else None,
            voucher.to_head_id,
            voucher.description,
            str(voucher.amount),
            voucher.status.value,
            voucher.created_by,
            voucher.created_at.isoformat(),
            voucher.updated_at.isoformat() if voucher.updated_at else None,
        )

    @staticmethod
    def _row_to_head(row: tuple[Any, ...]) -> AccountHead:
        """컬럼 순서: head_id, name, kind, status, created_at"""
        return AccountHead(
            id=row[0],
            name=row[1],
            kind=HeadKind(row[2]),
            status=RecordStatus(row[3]),
            created_at=parse_timestamp(row[4]),
        )

    @staticmethod
    def _row_to_party(row: tuple[Any, ...]) -> Party:
        """컬럼 순서: party_id, name, phone, address, party_type, status, created_at"""
        return Party(
            id=row[0],
            name=row[1],
            phone=row[2],
            address=row[3],
            party_type=row[4],
            status=RecordStatus(row[5]),
            created_at=parse_timestamp(row[6]),
        )

    @staticmethod
    def _row_to_voucher(row: tuple[Any, ...]) -> Voucher:
        """DB 행을 Voucher로 변환

        컬럼 순서:
        0: voucher_id, 1: voucher_number, 2: sequence, 3: voucher_date,
        4: voucher_type, 5: party_id, 6: from_head_type, 7: from_head_id,
        8: to_head_type, 9: to_head_id, 10: description, 11: amount,
        12: status, 13: created_by, 14: created_at, 15: updated_at
        """
        return Voucher(
            id=row[0],
            voucher_number=row[1],
            sequence=int(row[2]),
            date=date.fromisoformat(row[3]),
            voucher_type=VoucherType(row[4]),
            party_id=row[5],
            from_head_type=HeadKind(row[6]),
            from_head_id=row[7],
            to_head_type=HeadKind(row[8]) if row[8] else None,
            to_head_id=row[9],
            description=row[10] or "",
            amount=Decimal(row[11]),
            status=RecordStatus(row[12]),
            created_by=row[13],
            created_at=parse_timestamp(row[14]),
            updated_at=parse_timestamp(row[15]) if row[15] else None,
        )

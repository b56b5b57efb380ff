"""
데이터베이스 어댑터

SQLite WAL 모드 연결 관리 및 원장 저장소.
"""

from adapters.db.sqlite_adapter import SQLiteAdapter, create_connection
from adapters.db.sqlite_storage import SQLiteLedgerStorage

__all__ = [
    "SQLiteAdapter",
    "SQLiteLedgerStorage",
    "create_connection",
]

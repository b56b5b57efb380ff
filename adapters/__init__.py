"""
어댑터 레이어

원장 저장소(메모리, SQLite) 연동을 담당.
Protocol 기반 인터페이스로 Mock 교체 가능.
"""

from adapters.interfaces import ILedgerStorage

__all__ = [
    "ILedgerStorage",
]

"""
메모리 어댑터

테스트 및 임시 실행용 인메모리 원장 저장소.
"""

from adapters.memory.storage import InMemoryLedgerStorage, LedgerState

__all__ = [
    "InMemoryLedgerStorage",
    "LedgerState",
]

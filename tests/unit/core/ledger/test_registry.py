"""
core/ledger/registry.py 테스트

계정/거래처 생성, 이름 유일성, 참조 무결성, 소프트 삭제
"""

import pytest

from core.domain.models import AccountHead, Party
from core.errors import (
    ImmutableFieldError,
    InvalidArgumentError,
    NotFoundError,
    ReferentialIntegrityError,
)
from core.ledger.service import LedgerService
from core.types import HeadKind, RecordStatus


async def _receive(ledger: LedgerService, head: AccountHead, amount: str = "100", **extra) -> str:
    voucher = await ledger.create_voucher({
        "date": "2024-01-05",
        "voucher_type": "receive",
        "from_head_type": head.kind.value,
        "from_head_id": head.id,
        "amount": amount,
        **extra,
    })
    return voucher.id


class TestHeadRegistry:
    """HeadRegistry 테스트"""

    @pytest.mark.asyncio
    async def test_create_and_get(self, ledger: LedgerService) -> None:
        head = await ledger.create_head("  Main Bank  ", "bank")

        assert head.name == "Main Bank"
        assert head.kind == HeadKind.BANK
        assert await ledger.get_head(head.id) == head

    @pytest.mark.asyncio
    async def test_invalid_kind(self, ledger: LedgerService) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            await ledger.create_head("Loan", "liability")
        assert exc_info.value.field == "kind"

    @pytest.mark.asyncio
    async def test_empty_name(self, ledger: LedgerService) -> None:
        with pytest.raises(InvalidArgumentError):
            await ledger.create_head("   ", "bank")

    @pytest.mark.asyncio
    async def test_name_unique_case_insensitive_within_kind(self, ledger: LedgerService) -> None:
        await ledger.create_head("Cash", "bank")

        with pytest.raises(InvalidArgumentError) as exc_info:
            await ledger.create_head("CASH", "bank")
        assert exc_info.value.field == "name"

    @pytest.mark.asyncio
    async def test_same_name_different_kind_allowed(self, ledger: LedgerService) -> None:
        await ledger.create_head("Misc", "income")
        other = await ledger.create_head("Misc", "expense")

        assert other.kind == HeadKind.EXPENSE

    @pytest.mark.asyncio
    async def test_list_filters_kind(self, ledger: LedgerService) -> None:
        first = await ledger.create_head("First", "bank")
        await ledger.create_head("Rent", "expense")
        second = await ledger.create_head("Second", "bank")

        banks = await ledger.list_heads("bank")

        assert {h.id for h in banks} == {first.id, second.id}
        assert len(await ledger.list_heads()) == 3

    @pytest.mark.asyncio
    async def test_get_unknown(self, ledger: LedgerService) -> None:
        with pytest.raises(NotFoundError):
            await ledger.get_head("missing")

    @pytest.mark.asyncio
    async def test_write_unknown(self, ledger: LedgerService) -> None:
        for write in (
            ledger.rename_head("missing", "Ghost"),
            ledger.change_head_kind("missing", "others"),
            ledger.delete_head("missing"),
        ):
            with pytest.raises(NotFoundError) as exc_info:
                await write
            assert exc_info.value.field == "head_id"

    @pytest.mark.asyncio
    async def test_rename(self, ledger: LedgerService, bank_a: AccountHead, bank_b: AccountHead) -> None:
        renamed = await ledger.rename_head(bank_a.id, "Savings")
        assert renamed.name == "Savings"

        with pytest.raises(InvalidArgumentError):
            await ledger.rename_head(bank_a.id, "bank b")

    @pytest.mark.asyncio
    async def test_change_kind_unreferenced(self, ledger: LedgerService, bank_a: AccountHead) -> None:
        changed = await ledger.change_head_kind(bank_a.id, "others")

        assert changed.kind == HeadKind.OTHERS
        assert (await ledger.get_head(bank_a.id)).kind == HeadKind.OTHERS

    @pytest.mark.asyncio
    async def test_change_kind_referenced_rejected(
        self, ledger: LedgerService, bank_a: AccountHead
    ) -> None:
        await _receive(ledger, bank_a)

        with pytest.raises(ImmutableFieldError) as exc_info:
            await ledger.change_head_kind(bank_a.id, "income")
        assert exc_info.value.field == "kind"

    @pytest.mark.asyncio
    async def test_delete_unreferenced(self, ledger: LedgerService, bank_a: AccountHead) -> None:
        await ledger.delete_head(bank_a.id)

        assert await ledger.list_heads() == []
        stored = await ledger.get_head(bank_a.id)
        assert stored.status == RecordStatus.INACTIVE

    @pytest.mark.asyncio
    async def test_deleted_name_reusable(self, ledger: LedgerService, bank_a: AccountHead) -> None:
        await ledger.delete_head(bank_a.id)

        again = await ledger.create_head("Bank A", "bank")
        assert again.id != bank_a.id

    @pytest.mark.asyncio
    async def test_delete_referenced_rejected(self, ledger: LedgerService, bank_a: AccountHead) -> None:
        await _receive(ledger, bank_a)

        with pytest.raises(ReferentialIntegrityError):
            await ledger.delete_head(bank_a.id)

    @pytest.mark.asyncio
    async def test_delete_referenced_by_inactive_voucher_rejected(
        self, ledger: LedgerService, bank_a: AccountHead
    ) -> None:
        """삭제된 전표도 참조로 간주"""
        voucher_id = await _receive(ledger, bank_a)
        await ledger.delete_vouchers([voucher_id])

        with pytest.raises(ReferentialIntegrityError):
            await ledger.delete_head(bank_a.id)

    @pytest.mark.asyncio
    async def test_deleted_head_rejected_for_new_voucher(
        self, ledger: LedgerService, bank_a: AccountHead
    ) -> None:
        await ledger.delete_head(bank_a.id)

        with pytest.raises(NotFoundError):
            await _receive(ledger, bank_a)


class TestPartyRegistry:
    """PartyRegistry 테스트"""

    @pytest.mark.asyncio
    async def test_create(self, ledger: LedgerService, customer: Party) -> None:
        assert customer.name == "Acme Traders"
        assert customer.phone == "010-1234-5678"
        assert customer.party_type == "customer"

    @pytest.mark.asyncio
    async def test_names_not_unique(self, ledger: LedgerService) -> None:
        first = await ledger.create_party("Kim")
        second = await ledger.create_party("Kim")

        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_list_ordered_by_name(self, ledger: LedgerService) -> None:
        await ledger.create_party("zeta")
        await ledger.create_party("Alpha")
        await ledger.create_party("beta")

        names = [p.name for p in await ledger.list_parties()]
        assert names == ["Alpha", "beta", "zeta"]

    @pytest.mark.asyncio
    async def test_update_contact_keeps_unspecified(self, ledger: LedgerService, customer: Party) -> None:
        updated = await ledger.update_party_contact(customer.id, address="Busan")

        assert updated.address == "Busan"
        assert updated.phone == "010-1234-5678"

    @pytest.mark.asyncio
    async def test_rename(self, ledger: LedgerService, customer: Party) -> None:
        renamed = await ledger.rename_party(customer.id, "Acme Ltd")
        assert (await ledger.get_party(customer.id)).name == renamed.name == "Acme Ltd"

    @pytest.mark.asyncio
    async def test_delete_unreferenced(self, ledger: LedgerService, customer: Party) -> None:
        await ledger.delete_party(customer.id)

        assert await ledger.list_parties() == []
        assert len(await ledger.list_parties(include_inactive=True)) == 1

    @pytest.mark.asyncio
    async def test_delete_referenced_rejected(
        self, ledger: LedgerService, bank_a: AccountHead, customer: Party
    ) -> None:
        await _receive(ledger, bank_a, party_id=customer.id)

        with pytest.raises(ReferentialIntegrityError):
            await ledger.delete_party(customer.id)

    @pytest.mark.asyncio
    async def test_deactivate_referenced_allowed(
        self, ledger: LedgerService, bank_a: AccountHead, customer: Party
    ) -> None:
        """참조 중이어도 비활성화는 허용, 과거 전표 유지"""
        voucher_id = await _receive(ledger, bank_a, party_id=customer.id)

        party = await ledger.deactivate_party(customer.id)

        assert party.status == RecordStatus.INACTIVE
        assert (await ledger.get_voucher(voucher_id)).party_id == customer.id
        assert await ledger.list_parties() == []

    @pytest.mark.asyncio
    async def test_deactivate_idempotent(self, ledger: LedgerService, customer: Party) -> None:
        await ledger.deactivate_party(customer.id)
        again = await ledger.deactivate_party(customer.id)

        assert again.status == RecordStatus.INACTIVE

    @pytest.mark.asyncio
    async def test_inactive_party_rejected_for_new_voucher(
        self, ledger: LedgerService, bank_a: AccountHead, customer: Party
    ) -> None:
        await ledger.deactivate_party(customer.id)

        with pytest.raises(NotFoundError) as exc_info:
            await _receive(ledger, bank_a, party_id=customer.id)
        assert exc_info.value.field == "party_id"

"""
Web API 라우트 테스트

메모리 원장 서비스로 교체한 FastAPI 앱에 httpx로 요청.
엔진 오류 → HTTP 상태 코드 매핑 확인.
"""

import httpx
import pytest
import pytest_asyncio

from core.ledger.service import LedgerService
from web.app import app
from web.dependencies import get_ledger_service


@pytest_asyncio.fixture
async def client(ledger: LedgerService) -> httpx.AsyncClient:
    app.dependency_overrides[get_ledger_service] = lambda: ledger
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def create_head(client: httpx.AsyncClient, name: str, kind: str = "bank") -> dict:
    response = await client.post("/api/heads", json={"name": name, "kind": kind})
    assert response.status_code == 201
    return response.json()


async def create_receive(client: httpx.AsyncClient, head: dict, amount: str = "500", **extra) -> dict:
    response = await client.post("/api/vouchers", json={
        "date": "2024-01-05",
        "voucher_type": "receive",
        "from_head_type": head["kind"],
        "from_head_id": head["id"],
        "amount": amount,
        **extra,
    })
    assert response.status_code == 201, response.text
    return response.json()


class TestHealth:
    """GET /health"""

    @pytest.mark.asyncio
    async def test_health(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["storage"] == "memory"


class TestVoucherRoutes:
    """/api/vouchers"""

    @pytest.mark.asyncio
    async def test_create_and_get(self, client: httpx.AsyncClient) -> None:
        head = await create_head(client, "Bank A")
        created = await create_receive(client, head, description="deposit")

        assert created["voucher_number"] == "VCH-000001"
        assert created["amount"] == "500"
        assert created["from_head_name"] == "Bank A"

        response = await client.get(f"/api/vouchers/{created['id']}")
        assert response.status_code == 200
        assert response.json()["description"] == "deposit"

    @pytest.mark.asyncio
    async def test_list_with_stats(self, client: httpx.AsyncClient) -> None:
        head = await create_head(client, "Bank A")
        await create_receive(client, head, "500")
        await create_receive(client, head, "250")

        response = await client.get("/api/vouchers", params={"page": 1, "page_size": 1})
        body = response.json()

        assert response.status_code == 200
        assert len(body["rows"]) == 1
        assert body["total_count"] == 2
        assert body["total_pages"] == 2
        assert body["stats"]["total_receive"] == "750"

    @pytest.mark.asyncio
    async def test_list_text_search(self, client: httpx.AsyncClient) -> None:
        head = await create_head(client, "Bank A")
        await create_receive(client, head, description="Invoice 42")
        await create_receive(client, head, description="Other")

        body = (await client.get("/api/vouchers", params={"q": "invoice"})).json()
        assert [row["description"] for row in body["rows"]] == ["Invoice 42"]

    @pytest.mark.asyncio
    async def test_update(self, client: httpx.AsyncClient) -> None:
        head = await create_head(client, "Bank A")
        created = await create_receive(client, head)

        response = await client.patch(f"/api/vouchers/{created['id']}", json={"amount": "100.50"})

        assert response.status_code == 200
        assert response.json()["amount"] == "100.50"
        assert response.json()["updated_at"] is not None

    @pytest.mark.asyncio
    async def test_large_string_amount_exact(self, client: httpx.AsyncClient) -> None:
        head = await create_head(client, "Bank A")
        created = await create_receive(client, head, amount="12345678901234567.89")

        assert created["amount"] == "12345678901234567.89"
        response = await client.get(f"/api/heads/{head['id']}/balance")
        assert response.json()["balance"] == "12345678901234567.89"

    @pytest.mark.asyncio
    async def test_json_float_amount_rejected(self, client: httpx.AsyncClient) -> None:
        """JSON 실수 금액은 반올림 저장하지 않고 거부"""
        head = await create_head(client, "Bank A")
        body = (
            '{"date": "2024-01-05", "voucher_type": "receive", "from_head_type": "bank", '
            f'"from_head_id": "{head["id"]}", "amount": 12345678901234567.89}}'
        )

        response = await client.post(
            "/api/vouchers", content=body, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 422
        assert (await client.get("/api/vouchers")).json()["total_count"] == 0

    @pytest.mark.asyncio
    async def test_update_json_float_amount_rejected(self, client: httpx.AsyncClient) -> None:
        head = await create_head(client, "Bank A")
        created = await create_receive(client, head)

        response = await client.patch(
            f"/api/vouchers/{created['id']}",
            content='{"amount": 100.5}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 422
        assert (await client.get(f"/api/vouchers/{created['id']}")).json()["amount"] == "500"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field, value", [("id", "other-id"), ("sequence", 99)])
    async def test_update_identity_fields_immutable(
        self, client: httpx.AsyncClient, field: str, value: object
    ) -> None:
        head = await create_head(client, "Bank A")
        created = await create_receive(client, head)

        response = await client.patch(f"/api/vouchers/{created['id']}", json={field: value})

        assert response.status_code == 409
        assert response.json() == {
            "error": "Immutable",
            "message": f"변경할 수 없는 필드입니다: {field}",
            "field": field,
        }

    @pytest.mark.asyncio
    async def test_delete_partial(self, client: httpx.AsyncClient) -> None:
        head = await create_head(client, "Bank A")
        first = await create_receive(client, head)
        second = await create_receive(client, head)

        response = await client.request(
            "DELETE", "/api/vouchers", json={"ids": [first["id"], second["id"], "unknown"]}
        )

        assert response.status_code == 200
        assert response.json() == {"deleted_count": 2, "failed_ids": ["unknown"]}


class TestErrorMapping:
    """엔진 오류 → HTTP 상태 코드"""

    @pytest.mark.asyncio
    async def test_not_found(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/api/vouchers/missing")

        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"

    @pytest.mark.asyncio
    async def test_invalid_amount(self, client: httpx.AsyncClient) -> None:
        head = await create_head(client, "Bank A")

        response = await client.post("/api/vouchers", json={
            "date": "2024-01-05",
            "voucher_type": "receive",
            "from_head_type": "bank",
            "from_head_id": head["id"],
            "amount": "-5",
        })

        assert response.status_code == 400
        assert response.json() == {
            "error": "InvalidArgument",
            "message": response.json()["message"],
            "field": "amount",
        }

    @pytest.mark.asyncio
    async def test_invalid_filter(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/api/vouchers", params={"voucher_type": "refund"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_immutable_field(self, client: httpx.AsyncClient) -> None:
        head = await create_head(client, "Bank A")
        created = await create_receive(client, head)

        response = await client.patch(
            f"/api/vouchers/{created['id']}", json={"voucher_type": "payment"}
        )

        assert response.status_code == 409
        assert response.json()["error"] == "Immutable"
        assert response.json()["field"] == "voucher_type"

    @pytest.mark.asyncio
    async def test_referential_integrity(self, client: httpx.AsyncClient) -> None:
        head = await create_head(client, "Bank A")
        await create_receive(client, head)

        response = await client.delete(f"/api/heads/{head['id']}")

        assert response.status_code == 409
        assert response.json()["error"] == "ReferentialIntegrity"

    @pytest.mark.asyncio
    async def test_request_validation(self, client: httpx.AsyncClient) -> None:
        """필수 필드 누락은 FastAPI 검증 (422)"""
        response = await client.post("/api/vouchers", json={"voucher_type": "receive"})
        assert response.status_code == 422


class TestHeadRoutes:
    """/api/heads"""

    @pytest.mark.asyncio
    async def test_balance_and_summary(self, client: httpx.AsyncClient) -> None:
        bank_a = await create_head(client, "Bank A")
        bank_b = await create_head(client, "Bank B")
        await create_receive(client, bank_a, "500")
        await client.post("/api/vouchers", json={
            "date": "2024-01-06",
            "voucher_type": "contra",
            "from_head_type": "bank",
            "from_head_id": bank_a["id"],
            "to_head_type": "bank",
            "to_head_id": bank_b["id"],
            "amount": "200",
        })

        balance = (await client.get(f"/api/heads/{bank_a['id']}/balance")).json()
        assert balance["balance"] == "300"
        assert balance["kind"] == "bank"

        as_of = (await client.get(
            f"/api/heads/{bank_b['id']}/balance", params={"as_of": "2024-01-05"}
        )).json()
        assert as_of["balance"] == "0"

        summary = (await client.get("/api/heads/summary", params={"kind": "bank"})).json()
        assert {row["name"]: row["balance"] for row in summary} == {"Bank A": "300", "Bank B": "200"}

    @pytest.mark.asyncio
    async def test_rename_change_kind_delete(self, client: httpx.AsyncClient) -> None:
        head = await create_head(client, "Misc")

        renamed = await client.patch(f"/api/heads/{head['id']}", json={"name": "Sundry"})
        assert renamed.json()["name"] == "Sundry"

        changed = await client.put(f"/api/heads/{head['id']}/kind", json={"kind": "others"})
        assert changed.json()["kind"] == "others"

        deleted = await client.delete(f"/api/heads/{head['id']}")
        assert deleted.status_code == 204
        assert (await client.get("/api/heads")).json() == []

    @pytest.mark.asyncio
    async def test_duplicate_name(self, client: httpx.AsyncClient) -> None:
        await create_head(client, "Cash")

        response = await client.post("/api/heads", json={"name": "cash", "kind": "bank"})
        assert response.status_code == 400


class TestPartyRoutes:
    """/api/parties"""

    @pytest.mark.asyncio
    async def test_party_lifecycle(self, client: httpx.AsyncClient) -> None:
        head = await create_head(client, "Bank A")
        party = (await client.post("/api/parties", json={"name": "Acme"})).json()
        await create_receive(client, head, "80", party_id=party["id"])

        updated = await client.patch(f"/api/parties/{party['id']}", json={"phone": "010"})
        assert updated.json()["phone"] == "010"

        summary = (await client.get("/api/parties/summary")).json()
        assert summary[0]["receive"] == "80"
        assert summary[0]["voucher_count"] == 1

        blocked = await client.delete(f"/api/parties/{party['id']}")
        assert blocked.status_code == 409

        deactivated = await client.post(f"/api/parties/{party['id']}/deactivate")
        assert deactivated.json()["status"] == "inactive"
        assert (await client.get("/api/parties")).json() == []


class TestReportRoutes:
    """/api/reports"""

    @pytest.mark.asyncio
    async def test_daily(self, client: httpx.AsyncClient) -> None:
        head = await create_head(client, "Bank A")
        await create_receive(client, head, "500")

        report = (await client.get("/api/reports/daily", params={"date": "2024-01-05"})).json()

        assert report["closing_balance"] == "500"
        assert report["receives"][0]["from_head_name"] == "Bank A"

    @pytest.mark.asyncio
    async def test_daily_summary_reversed(self, client: httpx.AsyncClient) -> None:
        response = await client.get(
            "/api/reports/daily-summary",
            params={"from_date": "2024-02-01", "to_date": "2024-01-01"},
        )
        assert response.status_code == 400

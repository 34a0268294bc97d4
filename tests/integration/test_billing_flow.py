"""End-to-end billing cycle over the HTTP API."""

from datetime import date, timedelta
from decimal import Decimal

from dormitory.models.audit_log import AuditLog


def _mark(client, occupant_id: int, start: date, days: int) -> None:
    for offset in range(days):
        day = (start + timedelta(days=offset)).isoformat()
        response = client.put(f"/attendance/{occupant_id}/{day}", json={"is_present": True})
        assert response.status_code == 200


class TestBillingCycle:
    """Occupants, attendance, bill, payments and statements in one period."""

    def test_full_cycle(self, client, test_db_session):
        admin = {"X-Actor": "admin"}
        ana = client.post("/occupants", json={"name": "Ana", "room": "101", "monthly_rent": "1500"}).json()
        ben = client.post("/occupants", json={"name": "Ben", "room": "102", "monthly_rent": "1500"}).json()
        cid = client.post("/occupants", json={"name": "Cid", "room": "103"}).json()

        period = client.post(
            "/periods",
            json={"start_date": "2025-08-22", "end_date": "2025-09-21", "make_current": True},
            headers=admin,
        ).json()

        # Ana stays 20 days across the month boundary, Ben 10, Cid never shows up
        _mark(client, ana["id"], date(2025, 8, 25), 20)
        _mark(client, ben["id"], date(2025, 9, 5), 10)
        # outside the period, must not count
        _mark(client, ben["id"], date(2025, 9, 22), 3)

        summary = client.get(f"/periods/{period['id']}/attendance-summary").json()
        assert [(s["occupant_name"], s["days_stayed"]) for s in summary] == [
            ("Ana", 20),
            ("Ben", 10),
            ("Cid", 0),
        ]

        reading = {"previous_reading": "100", "current_reading": "150", "rate_per_unit": "13.71"}
        preview = client.post("/bills/preview", json=reading).json()
        assert preview["start_date"] == "2025-08-22"
        assert Decimal(str(preview["total_cost"])) == Decimal("685.50")
        assert {s["occupant_id"] for s in preview["shares"]} == {ana["id"], ben["id"]}

        bill = client.post("/bills", json={"period_id": period["id"], **reading}, headers=admin).json()
        shares = {s["occupant_id"]: s for s in bill["shares"]}
        assert Decimal(str(shares[ana["id"]]["share_amount"])) == Decimal("457.00")
        assert Decimal(str(shares[ben["id"]]["share_amount"])) == Decimal("228.50")
        assert cid["id"] not in shares

        payment = client.post(
            "/payments",
            json={
                "occupant_id": ana["id"],
                "kind": "electricity",
                "bill_share_id": shares[ana["id"]]["id"],
                "amount": "457.00",
                "payment_date": "2025-09-20",
                "payment_method": "cash",
            },
            headers=admin,
        ).json()
        client.post(
            "/payments",
            json={
                "occupant_id": ana["id"],
                "month": "2025-08",
                "amount": "1500.00",
                "payment_date": "2025-09-20",
                "payment_method": "gcash",
            },
            headers=admin,
        )

        statuses = {s["occupant_id"]: s["status"] for s in client.get(f"/bills/{bill['id']}/status").json()}
        assert statuses == {ana["id"]: "paid", ben["id"]: "overdue"}

        statement = client.get(
            f"/occupants/{ana['id']}/statement", params={"period_id": period["id"]}
        ).json()
        assert [line["status"] for line in statement["lines"]] == ["paid", "paid"]
        assert Decimal(str(statement["total_paid"])) == Decimal("1957.00")

        assert client.delete(f"/payments/{payment['id']}", headers=admin).status_code == 204

        statuses = {s["occupant_id"]: s["status"] for s in client.get(f"/bills/{bill['id']}/status").json()}
        assert statuses[ana["id"]] == "overdue"

        dashboard = client.get("/analytics/dashboard", params={"month": "2025-08"}).json()
        assert Decimal(str(dashboard["monthly_revenue"])) == Decimal("1500.00")
        assert Decimal(str(dashboard["latest_effective_rate"])) == Decimal("13.71")

        actions = {(e.entity_type, e.action) for e in test_db_session.query(AuditLog).all()}
        assert {("period", "create"), ("bill", "create"), ("payment", "create"), ("payment", "delete")} <= actions
        assert all(e.actor == "admin" for e in test_db_session.query(AuditLog).all())

    def test_rejected_bill_leaves_no_trace(self, client, test_db_session):
        ana = client.post("/occupants", json={"name": "Ana", "room": "101"}).json()

        response = client.post(
            "/bills",
            json={
                "start_date": "2025-08-22",
                "end_date": "2025-09-21",
                "previous_reading": "150",
                "current_reading": "100",
                "occupants": [{"occupant_id": ana["id"], "days_stayed": 5}],
            },
        )

        assert response.status_code == 422
        assert client.get("/bills").json() == []
        assert test_db_session.query(AuditLog).filter_by(entity_type="bill").count() == 0

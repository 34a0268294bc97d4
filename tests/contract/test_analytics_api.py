"""Contract tests for /analytics endpoints."""

from decimal import Decimal


class TestDashboardEndpoint:
    def test_dashboard(self, client, make_occupant):
        ana = make_occupant()
        client.post(
            "/payments",
            json={
                "occupant_id": ana.id,
                "month": "2025-08",
                "amount": "1500.00",
                "payment_date": "2025-08-05",
                "payment_method": "cash",
            },
        )

        response = client.get("/analytics/dashboard", params={"month": "2025-08"})

        assert response.status_code == 200
        body = response.json()
        assert body["month"] == "2025-08"
        assert body["active_occupants"] == 1
        assert body["occupancy_rate"] == 100
        assert Decimal(str(body["monthly_revenue"])) == Decimal("1500.00")
        assert body["latest_effective_rate"] is None

    def test_dashboard_bad_month(self, client):
        assert client.get("/analytics/dashboard", params={"month": "2025-8"}).status_code == 422

"""Tests for dashboard analytics."""

from datetime import date
from decimal import Decimal

from dormitory.models.payment import Payment, PaymentKind, PaymentStatus
from dormitory.services.analytics_service import AnalyticsService
from dormitory.services.bills_service import BillsService
from dormitory.services.period_service import PeriodRange


def _payment(occupant_id, amount, month=None, paid_on=date(2025, 8, 5), status=PaymentStatus.PAID):
    return Payment(
        occupant_id=occupant_id,
        kind=PaymentKind.RENT,
        month=month,
        amount=Decimal(amount),
        payment_date=paid_on,
        payment_method="cash",
        status=status,
    )


class TestDashboardSummary:
    def test_empty_database(self, test_db_session):
        summary = AnalyticsService(test_db_session).dashboard_summary("2025-08")

        assert summary.total_occupants == 0
        assert summary.occupancy_rate == 0
        assert summary.monthly_revenue == Decimal(0)
        assert summary.latest_effective_rate is None

    def test_occupancy_and_revenue(self, test_db_session, make_occupant):
        ana = make_occupant("Ana", "101")
        make_occupant("Ben", "102")
        make_occupant("Cid", "103", is_active=False)
        test_db_session.add_all(
            [
                _payment(ana.id, "1500.00", month="2025-08"),
                _payment(ana.id, "200.00", paid_on=date(2025, 8, 20)),
                _payment(ana.id, "999.00", month="2025-07"),
                _payment(ana.id, "50.00", month="2025-08", status=PaymentStatus.PENDING),
            ]
        )
        test_db_session.commit()

        summary = AnalyticsService(test_db_session).dashboard_summary("2025-08")

        assert summary.active_occupants == 2
        assert summary.occupancy_rate == 67
        assert summary.monthly_revenue == Decimal("1700.00")
        assert summary.pending_payments == 1

    def test_effective_rate_from_latest_bill(self, test_db_session, make_occupant):
        ana = make_occupant()
        BillsService(test_db_session).save_bill(
            PeriodRange(date(2025, 8, 1), date(2025, 8, 31)), 100, 150, "13.71", days_stayed={ana.id: 5}
        )

        summary = AnalyticsService(test_db_session).dashboard_summary("2025-08")

        assert summary.latest_effective_rate == Decimal("13.71")

    def test_zero_consumption_bill_has_no_rate(self, test_db_session, make_occupant):
        ana = make_occupant()
        BillsService(test_db_session).save_bill(
            PeriodRange(date(2025, 8, 1), date(2025, 8, 31)), 100, 100, "13.71", days_stayed={ana.id: 5}
        )

        assert AnalyticsService(test_db_session).dashboard_summary("2025-08").latest_effective_rate is None

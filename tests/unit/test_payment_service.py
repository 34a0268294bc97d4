"""Tests for payment service: ledger writes and occupant statements."""

from datetime import date
from decimal import Decimal

import pytest

from dormitory.errors import NotFoundError, ValidationError
from dormitory.models.audit_log import AuditLog
from dormitory.models.payment import Payment, PaymentKind, PaymentStatus
from dormitory.services.bills_service import BillsService
from dormitory.services.payment_service import PaymentService
from dormitory.services.reconciliation import ObligationStatus


@pytest.fixture
def billed(test_db_session, make_occupant, august_period):
    """Two occupants with a saved bill for the August period."""
    ana = make_occupant("Ana", "101", monthly_rent="1500.00")
    ben = make_occupant("Ben", "102", monthly_rent="1800.00")
    bill = BillsService(test_db_session).save_bill(
        august_period, 100, 150, "13.71", days_stayed={ana.id: 20, ben.id: 10}
    )
    shares = {s.occupant_id: s for s in bill.shares}
    return ana, ben, shares


class TestRecordPayment:
    def test_rent_payment(self, test_db_session, make_occupant):
        ana = make_occupant()

        payment = PaymentService(test_db_session).record_payment(
            occupant_id=ana.id,
            amount=Decimal("1500.00"),
            payment_date=date(2025, 9, 1),
            payment_method="gcash",
            month="2025-08",
            actor="admin",
        )

        assert payment.kind == PaymentKind.RENT
        assert payment.status == PaymentStatus.PAID
        assert test_db_session.query(AuditLog).filter_by(entity_type="payment").count() == 1

    def test_rent_requires_month(self, test_db_session, make_occupant):
        ana = make_occupant()

        with pytest.raises(ValidationError) as exc_info:
            PaymentService(test_db_session).record_payment(
                ana.id, Decimal("10"), date(2025, 9, 1), "cash", month="Aug"
            )

        assert exc_info.value.field == "month"

    def test_electricity_payment_links_share(self, test_db_session, billed):
        ana, _, shares = billed

        payment = PaymentService(test_db_session).record_payment(
            ana.id,
            Decimal("457.00"),
            date(2025, 9, 15),
            "cash",
            kind=PaymentKind.ELECTRICITY,
            bill_share_id=shares[ana.id].id,
        )

        assert payment.bill_share_id == shares[ana.id].id

    def test_electricity_requires_share(self, test_db_session, make_occupant):
        ana = make_occupant()

        with pytest.raises(ValidationError) as exc_info:
            PaymentService(test_db_session).record_payment(
                ana.id, Decimal("10"), date(2025, 9, 1), "cash", kind=PaymentKind.ELECTRICITY
            )

        assert exc_info.value.field == "bill_share_id"

    def test_share_of_another_occupant_rejected(self, test_db_session, billed):
        ana, ben, shares = billed

        with pytest.raises(ValidationError):
            PaymentService(test_db_session).record_payment(
                ana.id,
                Decimal("10"),
                date(2025, 9, 1),
                "cash",
                kind=PaymentKind.ELECTRICITY,
                bill_share_id=shares[ben.id].id,
            )

    def test_unknown_share(self, test_db_session, make_occupant):
        ana = make_occupant()

        with pytest.raises(NotFoundError):
            PaymentService(test_db_session).record_payment(
                ana.id,
                Decimal("10"),
                date(2025, 9, 1),
                "cash",
                kind=PaymentKind.ELECTRICITY,
                bill_share_id=999,
            )

    def test_negative_amount(self, test_db_session, make_occupant):
        ana = make_occupant()

        with pytest.raises(ValidationError) as exc_info:
            PaymentService(test_db_session).record_payment(
                ana.id, Decimal("-1"), date(2025, 9, 1), "cash", month="2025-08"
            )

        assert exc_info.value.field == "amount"

    def test_unknown_occupant(self, test_db_session):
        with pytest.raises(NotFoundError):
            PaymentService(test_db_session).record_payment(
                1, Decimal("10"), date(2025, 9, 1), "cash", month="2025-08"
            )


class TestUpdateAndDelete:
    def test_mark_as_paid(self, test_db_session, make_occupant):
        ana = make_occupant()
        service = PaymentService(test_db_session)
        payment = service.record_payment(
            ana.id,
            Decimal("1500"),
            date(2025, 9, 1),
            "cash",
            month="2025-08",
            status=PaymentStatus.PENDING,
        )

        assert service.mark_as_paid(payment.id).status == PaymentStatus.PAID

    def test_update_rejects_unknown_field(self, test_db_session, make_occupant):
        ana = make_occupant()
        service = PaymentService(test_db_session)
        payment = service.record_payment(ana.id, Decimal("1"), date(2025, 9, 1), "cash", month="2025-08")

        with pytest.raises(ValidationError):
            service.update_payment(payment.id, occupant_id=7)

    def test_delete_payment(self, test_db_session, make_occupant):
        ana = make_occupant()
        service = PaymentService(test_db_session)
        payment = service.record_payment(ana.id, Decimal("1"), date(2025, 9, 1), "cash", month="2025-08")

        payment_id = payment.id

        service.delete_payment(payment_id, actor="admin")

        assert test_db_session.query(Payment).count() == 0
        assert test_db_session.query(AuditLog).filter_by(action="delete").count() == 1
        with pytest.raises(NotFoundError):
            service.get_payment(payment_id)


class TestStatement:
    def test_statement_lines_and_totals(self, test_db_session, billed, august_period):
        ana, _, shares = billed
        service = PaymentService(test_db_session)
        service.record_payment(
            ana.id,
            Decimal("457.00"),
            date(2025, 9, 15),
            "cash",
            kind=PaymentKind.ELECTRICITY,
            bill_share_id=shares[ana.id].id,
        )

        statement = service.get_statement(ana.id, august_period, today=date(2025, 9, 25))

        electricity, rent = statement.lines
        assert electricity.status == ObligationStatus.PAID
        assert electricity.amount == Decimal("457.00")
        assert rent.month == "2025-08"
        assert rent.status == ObligationStatus.OVERDUE
        assert statement.total_paid == Decimal("457.00")
        assert statement.total_overdue == Decimal("1500.00")
        assert statement.total_pending == Decimal(0)

    def test_deleting_payment_reverts_share(self, test_db_session, billed, august_period):
        ana, _, shares = billed
        service = PaymentService(test_db_session)
        payment = service.record_payment(
            ana.id,
            Decimal("457.00"),
            date(2025, 9, 15),
            "cash",
            kind=PaymentKind.ELECTRICITY,
            bill_share_id=shares[ana.id].id,
        )

        service.delete_payment(payment.id)
        statement = service.get_statement(ana.id, august_period, today=date(2025, 9, 20))

        assert statement.lines[0].status == ObligationStatus.PENDING

    def test_rent_uses_current_monthly_rent(self, test_db_session, billed, august_period):
        _, ben, _ = billed

        statement = PaymentService(test_db_session).get_statement(
            ben.id, august_period, today=date(2025, 9, 1)
        )

        assert statement.lines[-1].amount == Decimal("1800.00")
        assert statement.lines[-1].status == ObligationStatus.PENDING

"""
Tests for tropicana/services/report_service.py
"""
import pytest
from datetime import date, datetime, timedelta
from decimal import Decimal

from tropicana.models.booking import Payment
from tropicana.models.enums import PaymentMethod, PaymentStatus, ReservationStatus, RoomStatus
from tropicana.services.exceptions import ValidationError
from tropicana.services.report_service import ReportService

TODAY = date(2030, 3, 15)


def _payment(db, reservation, amount, status=PaymentStatus.PAID, processed_at=None):
    db.add(Payment(
        reservation_id=reservation.id,
        amount=Decimal(amount),
        method=PaymentMethod.CASH,
        status=status,
        processed_at=processed_at or datetime(2030, 3, 14, 10, 0),
    ))
    db.commit()


def test_dashboard_counts(db_session, sample_rooms, make_reservation):
    sample_rooms[0].status = RoomStatus.OCCUPIED
    make_reservation(check_in=TODAY, check_out=TODAY + timedelta(days=1))
    make_reservation(status=ReservationStatus.CHECKED_IN, check_in=TODAY - timedelta(days=1), check_out=TODAY)
    make_reservation(status=ReservationStatus.CANCELLED, check_in=TODAY, check_out=TODAY + timedelta(days=1))
    db_session.commit()

    stats = ReportService(db_session).get_dashboard_stats(today=TODAY)

    assert stats["total_properties"] == 1
    assert stats["total_rooms"] == 2
    assert stats["rooms_by_status"]["OCCUPIED"] == 1
    assert stats["occupancy_rate"] == 50.0
    assert stats["today_arrivals"] == 1
    assert stats["today_departures"] == 1
    assert stats["reservations_by_status"]["CANCELLED"] == 1
    assert len(stats["recent_reservations"]) == 3


def test_inactive_rooms_excluded_from_occupancy(db_session, sample_rooms):
    sample_rooms[0].status = RoomStatus.OCCUPIED
    sample_rooms[1].is_active = False
    db_session.commit()
    assert ReportService(db_session).get_dashboard_stats(today=TODAY)["occupancy_rate"] == 100.0


def test_revenue_window_and_statuses(db_session, make_reservation):
    reservation = make_reservation()
    _payment(db_session, reservation, "1000.00")
    _payment(db_session, reservation, "250.50", status=PaymentStatus.SUCCEEDED)
    _payment(db_session, reservation, "900.00", status=PaymentStatus.FAILED)
    _payment(db_session, reservation, "400.00", processed_at=datetime(2030, 1, 1))

    stats = ReportService(db_session).get_dashboard_stats(today=TODAY)
    assert stats["revenue_last_30_days"] == Decimal("1250.50")


def test_revenue_series_has_every_day(db_session, make_reservation):
    reservation = make_reservation()
    _payment(db_session, reservation, "300.00", processed_at=datetime(2030, 3, 13, 9, 0))
    _payment(db_session, reservation, "200.00", processed_at=datetime(2030, 3, 13, 18, 0))

    series = ReportService(db_session).get_revenue_series(date(2030, 3, 12), date(2030, 3, 14))

    assert [p["day"] for p in series] == [date(2030, 3, 12), date(2030, 3, 13), date(2030, 3, 14)]
    assert series[1]["revenue"] == Decimal("500.00")
    assert series[1]["payments"] == 2
    assert series[2] == {"day": date(2030, 3, 14), "revenue": Decimal("0.00"), "payments": 0}


def test_property_filter(db_session, sample_property, make_reservation):
    _payment(db_session, make_reservation(), "100.00")
    stats = ReportService(db_session).get_dashboard_stats(property_id=sample_property.id + 1, today=TODAY)
    assert stats["total_properties"] == 0
    assert stats["revenue_last_30_days"] == Decimal("0.00")


def test_revenue_series_rejects_inverted_range(db_session):
    with pytest.raises(ValidationError):
        ReportService(db_session).get_revenue_series(date(2030, 3, 14), date(2030, 3, 12))


def test_revenue_series_excludes_payments_outside_range(db_session, make_reservation):
    reservation = make_reservation()
    _payment(db_session, reservation, "111.00", processed_at=datetime(2030, 3, 11, 23, 59))
    _payment(db_session, reservation, "222.00", processed_at=datetime(2030, 3, 12, 0, 0))
    _payment(db_session, reservation, "333.00", processed_at=datetime(2030, 3, 14, 23, 59))
    _payment(db_session, reservation, "444.00", processed_at=datetime(2030, 3, 15, 0, 0))

    series = ReportService(db_session).get_revenue_series(date(2030, 3, 12), date(2030, 3, 14))
    assert [p["revenue"] for p in series] == [Decimal("222.00"), Decimal("0.00"), Decimal("333.00")]

"""
Dashboard, revenue and notification feed API tests
"""
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from tropicana.models.booking import Payment
from tropicana.models.enums import ReservationStatus, RoomStatus, PaymentStatus, PaymentMethod
from tropicana.services.notifications import notification_center


@pytest.fixture
def clean_feed():
    notification_center.unregister()
    notification_center.register()
    notification_center.clear()
    yield notification_center
    notification_center.clear()


def add_payment(db, reservation, amount, status=PaymentStatus.PAID, processed_at=None):
    payment = Payment(reservation_id=reservation.id, amount=Decimal(amount), currency="PHP",
                      method=PaymentMethod.CASH, status=status, provider="manual",
                      processed_at=processed_at or datetime.utcnow())
    db.add(payment)
    db.commit()
    return payment


class TestDashboard:

    def test_dashboard_figures(self, client: TestClient, db_session, staff_headers, sample_property,
                               sample_rooms, make_reservation):
        today = date.today()
        sample_rooms[0].status = RoomStatus.OCCUPIED
        db_session.commit()

        arriving = make_reservation(check_in=today, check_out=today + timedelta(days=1))
        make_reservation(status=ReservationStatus.PENDING)
        add_payment(db_session, arriving, "1170.00")
        add_payment(db_session, arriving, "999.00", status=PaymentStatus.FAILED)

        response = client.get("/analytics/dashboard", headers=staff_headers,
                              params={"property_id": sample_property.id})
        assert response.status_code == 200
        data = response.json()
        assert data["total_properties"] == 1
        assert data["total_rooms"] == 2
        assert data["total_guests"] == 1
        assert data["rooms_by_status"]["OCCUPIED"] == 1
        assert data["occupancy_rate"] == 50.0
        assert data["today_arrivals"] == 1
        assert data["reservations_by_status"]["PENDING"] == 1
        assert data["reservations_by_status"]["CONFIRMED"] == 1
        assert Decimal(data["revenue_last_30_days"]) == Decimal("1170.00")
        assert len(data["recent_reservations"]) == 2

    def test_empty_dashboard(self, client: TestClient, staff_headers):
        data = client.get("/analytics/dashboard", headers=staff_headers).json()
        assert data["occupancy_rate"] == 0.0
        assert data["recent_reservations"] == []


class TestRevenue:

    def test_daily_series(self, client: TestClient, db_session, manager_headers, make_reservation):
        reservation = make_reservation()
        yesterday = datetime.utcnow() - timedelta(days=1)
        add_payment(db_session, reservation, "500.00", processed_at=yesterday)
        add_payment(db_session, reservation, "250.00", processed_at=yesterday)

        response = client.get("/analytics/revenue", headers=manager_headers, params={
            "start": (date.today() - timedelta(days=2)).isoformat(),
            "end": date.today().isoformat(),
        })
        assert response.status_code == 200
        points = response.json()
        assert len(points) == 3
        by_day = {p["day"]: p for p in points}
        point = by_day[yesterday.date().isoformat()]
        assert Decimal(point["revenue"]) == Decimal("750.00")
        assert point["payments"] == 2

    def test_defaults_to_thirty_days(self, client: TestClient, manager_headers):
        points = client.get("/analytics/revenue", headers=manager_headers).json()
        assert len(points) == 30
        assert points[-1]["day"] == date.today().isoformat()

    def test_inverted_range(self, client: TestClient, manager_headers):
        response = client.get("/analytics/revenue", headers=manager_headers,
                              params={"start": "2026-03-10", "end": "2026-03-01"})
        assert response.status_code == 400

    def test_requires_manager(self, client: TestClient, staff_headers):
        assert client.get("/analytics/revenue", headers=staff_headers).status_code == 403


class TestNotificationFeed:

    def test_reservation_events_reach_the_feed(self, client: TestClient, clean_feed, staff_headers,
                                               make_reservation):
        reservation = make_reservation(status=ReservationStatus.PENDING)
        client.post(f"/reservations/{reservation.id}/confirm", headers=staff_headers)
        client.post(f"/reservations/{reservation.id}/payments", headers=staff_headers,
                    json={"amount": "2340.00", "method": "CASH"})

        feed = client.get("/notifications", headers=staff_headers).json()
        assert [n["title"] for n in feed] == ["Payment received", "Reservation updated"]
        assert "PENDING -> CONFIRMED" in feed[1]["message"]

        filtered = client.get("/notifications", headers=staff_headers,
                              params={"event_type": "payment.succeeded"}).json()
        assert len(filtered) == 1
        assert filtered[0]["severity"] == "success"

    def test_feedback_notification(self, client: TestClient, clean_feed, staff_headers):
        client.post("/feedbacks", json={"content": "Aircon in 204 is noisy", "category": "COMPLAINT"})
        feed = client.get("/notifications", headers=staff_headers, params={"limit": 1}).json()
        assert feed[0]["message"] == "COMPLAINT: Aircon in 204 is noisy"

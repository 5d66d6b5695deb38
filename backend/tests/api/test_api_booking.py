"""
Public booking and payment API tests
The PayMongo gateway is replaced by the fake client from conftest
"""
from decimal import Decimal
from fastapi.testclient import TestClient

from tropicana.models.booking import Reservation, Payment
from tropicana.models.enums import ReservationStatus, PaymentStatus, PaymentMethod


def booking_payload(prop, room_type, stay_dates, **extra):
    check_in, check_out = stay_dates
    payload = {
        "first_name": "Ana",
        "last_name": "Reyes",
        "email": "Ana.Reyes@example.com",
        "phone": "+639181112222",
        "check_in": check_in.isoformat(),
        "check_out": check_out.isoformat(),
        "adults": 2,
        "children": 0,
        "property_id": prop.id,
        "room_type_id": room_type.id,
    }
    payload.update(extra)
    return payload


class TestCreateWithPayment:

    def test_creates_pending_reservation_and_checkout(self, client: TestClient, db_session, fake_paymongo,
                                                      sample_property, sample_room_type, sample_rooms,
                                                      stay_dates):
        response = client.post("/reservations/create-with-payment",
                               json=booking_payload(sample_property, sample_room_type, stay_dates))

        assert response.status_code == 201
        data = response.json()
        assert data["checkout_url"] == "https://checkout.paymongo.com/cs_test_123"
        assert data["payment_session_id"] == "cs_test_123"
        assert data["confirmation_number"].startswith("RES-")

        reservation = db_session.get(Reservation, data["reservation_id"])
        assert reservation.status == ReservationStatus.PENDING
        assert reservation.total_amount == Decimal("2340.00")
        assert reservation.payment_intent_id == "cs_test_123"
        assert reservation.guest.email == "ana.reyes@example.com"

        payment = db_session.query(Payment).filter(Payment.reservation_id == reservation.id).one()
        assert payment.status == PaymentStatus.PENDING
        assert payment.checkout_session_id == "cs_test_123"

        kind, kwargs = fake_paymongo.calls[0]
        assert kind == "checkout_session"
        assert kwargs["line_items"][0]["amount"] == 234000
        assert kwargs["reference_number"] == reservation.confirmation_number
        assert "/booking/success?" in kwargs["success_url"]

    def test_repeat_guest_is_reused(self, client: TestClient, db_session, fake_paymongo, sample_property,
                                    sample_room_type, sample_rooms, sample_guest, stay_dates):
        response = client.post("/reservations/create-with-payment", json=booking_payload(
            sample_property, sample_room_type, stay_dates, email="maria@example.com", first_name="Maria"
        ))
        reservation = db_session.get(Reservation, response.json()["reservation_id"])
        assert reservation.guest_id == sample_guest.id

    def test_client_total_must_match(self, client: TestClient, fake_paymongo, sample_property,
                                     sample_room_type, sample_rooms, stay_dates):
        response = client.post("/reservations/create-with-payment", json=booking_payload(
            sample_property, sample_room_type, stay_dates, total_amount="2000.00"
        ))
        assert response.status_code == 400
        assert "Price has changed" in response.json()["detail"]

    def test_matching_client_figures_accepted(self, client: TestClient, fake_paymongo, sample_property,
                                              sample_room_type, sample_rooms, stay_dates):
        response = client.post("/reservations/create-with-payment", json=booking_payload(
            sample_property, sample_room_type, stay_dates, nights=2, total_amount="2340.00"
        ))
        assert response.status_code == 201

    def test_too_many_adults(self, client: TestClient, fake_paymongo, sample_property,
                             sample_room_type, sample_rooms, stay_dates):
        response = client.post("/reservations/create-with-payment", json=booking_payload(
            sample_property, sample_room_type, stay_dates, adults=3
        ))
        assert response.status_code == 400
        assert fake_paymongo.calls == []

    def test_sold_out(self, client: TestClient, fake_paymongo, sample_property, sample_room_type,
                      sample_rooms, make_reservation, stay_dates):
        make_reservation()
        make_reservation()
        response = client.post("/reservations/create-with-payment",
                               json=booking_payload(sample_property, sample_room_type, stay_dates))
        assert response.status_code == 409

    def test_gateway_failure_cancels_reservation(self, client: TestClient, db_session, fake_paymongo,
                                                 sample_property, sample_room_type, sample_rooms, stay_dates):
        fake_paymongo.fail_with = "PayMongo Error: amount is invalid"
        response = client.post("/reservations/create-with-payment",
                               json=booking_payload(sample_property, sample_room_type, stay_dates))

        assert response.status_code == 502
        reservation = db_session.query(Reservation).one()
        assert reservation.status == ReservationStatus.CANCELLED
        assert reservation.cancellation_reason == "Payment gateway error"


class TestPaymentIntent:

    def test_create_intent(self, client: TestClient, db_session, fake_paymongo, make_reservation):
        reservation = make_reservation(status=ReservationStatus.PENDING)
        response = client.post("/payments/create-intent", json={"reservation_id": reservation.id})

        assert response.status_code == 200
        assert response.json() == {"client_key": "pi_test_456_client_xyz", "payment_intent_id": "pi_test_456"}

        payment = db_session.query(Payment).filter(Payment.reservation_id == reservation.id).one()
        assert payment.method == PaymentMethod.PAYMONGO
        assert payment.provider_payment_id == "pi_test_456"
        assert fake_paymongo.calls[0][1]["amount"] == 234000

    def test_unknown_reservation(self, client: TestClient, fake_paymongo):
        response = client.post("/payments/create-intent", json={"reservation_id": 404})
        assert response.status_code == 404


class TestRefundAndRetry:

    def _paid(self, client, headers, reservation, amount="2340.00"):
        response = client.post(f"/reservations/{reservation.id}/payments", headers=headers,
                               json={"amount": amount, "method": "CARD"})
        return response.json()["id"]

    def test_partial_refund(self, client: TestClient, staff_headers, manager_headers, make_reservation):
        reservation = make_reservation()
        payment_id = self._paid(client, staff_headers, reservation)

        response = client.post(f"/payments/{payment_id}/refund", headers=manager_headers,
                               json={"amount": "340.00", "reason": "Late check-in credit"})
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "PARTIALLY_REFUNDED"
        assert Decimal(data["refunded_amount"]) == Decimal("340.00")

        detail = client.get(f"/reservations/{reservation.id}", headers=staff_headers).json()
        assert detail["payment_status"] == "PARTIALLY_REFUNDED"

    def test_full_refund(self, client: TestClient, staff_headers, manager_headers, make_reservation):
        reservation = make_reservation()
        payment_id = self._paid(client, staff_headers, reservation)

        response = client.post(f"/payments/{payment_id}/refund", headers=manager_headers,
                               json={"amount": "2340.00"})
        assert response.json()["status"] == "REFUNDED"

        detail = client.get(f"/reservations/{reservation.id}", headers=staff_headers).json()
        assert detail["payment_status"] == "REFUNDED"

    def test_refund_more_than_paid(self, client: TestClient, staff_headers, manager_headers, make_reservation):
        reservation = make_reservation()
        payment_id = self._paid(client, staff_headers, reservation, amount="500.00")

        response = client.post(f"/payments/{payment_id}/refund", headers=manager_headers,
                               json={"amount": "600.00"})
        assert response.status_code == 400

    def test_refund_requires_manager(self, client: TestClient, staff_headers, make_reservation):
        reservation = make_reservation()
        payment_id = self._paid(client, staff_headers, reservation)
        response = client.post(f"/payments/{payment_id}/refund", headers=staff_headers, json={"amount": "1.00"})
        assert response.status_code == 403

    def test_retry_failed_payment(self, client: TestClient, db_session, staff_headers, make_reservation):
        reservation = make_reservation()
        payment = Payment(reservation_id=reservation.id, amount=Decimal("2340.00"), currency="PHP",
                          method=PaymentMethod.CARD, status=PaymentStatus.FAILED, provider="paymongo",
                          failure_code="card_declined")
        db_session.add(payment)
        db_session.commit()

        response = client.post(f"/payments/{payment.id}/retry", headers=staff_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "PENDING"
        assert data["failure_code"] is None

    def test_retry_non_failed_payment(self, client: TestClient, staff_headers, make_reservation):
        reservation = make_reservation()
        payment_id = self._paid(client, staff_headers, reservation)
        response = client.post(f"/payments/{payment_id}/retry", headers=staff_headers)
        assert response.status_code == 400

    def test_list_payments_by_status(self, client: TestClient, staff_headers, sample_property, make_reservation):
        reservation = make_reservation()
        self._paid(client, staff_headers, reservation, amount="100.00")

        response = client.get("/payments", headers=staff_headers,
                              params={"property_id": sample_property.id, "status": "PAID"})
        assert len(response.json()) == 1
        response = client.get("/payments", headers=staff_headers, params={"status": "FAILED"})
        assert response.json() == []

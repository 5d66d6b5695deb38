"""
Property inventory API tests
Covers /properties, /room-types, /amenities, /rooms, /rates and /availability
"""
from datetime import date, timedelta
from decimal import Decimal
from fastapi.testclient import TestClient


PROPERTY_PAYLOAD = {
    "name": "Tropicana Cebu",
    "display_name": "Tropicana Cebu City Hotel",
    "slug": "tropicana-cebu",
    "property_type": "HOTEL",
    "city": "Cebu City",
}


class TestProperties:

    def test_list_properties_with_counts(self, client: TestClient, staff_headers, sample_rooms):
        response = client.get("/properties", headers=staff_headers)

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["slug"] == "tropicana-boracay"
        assert data[0]["counts"]["rooms"] == 2
        assert data[0]["counts"]["room_types"] == 1

    def test_list_requires_auth(self, client: TestClient):
        response = client.get("/properties")
        assert response.status_code in (401, 403)

    def test_create_property(self, client: TestClient, admin_headers):
        response = client.post("/properties", headers=admin_headers, json=PROPERTY_PAYLOAD)

        assert response.status_code == 201
        data = response.json()
        assert data["slug"] == "tropicana-cebu"
        assert data["check_in_time"] == "15:00"
        assert data["primary_currency"] == "PHP"

    def test_create_property_requires_admin(self, client: TestClient, manager_headers):
        response = client.post("/properties", headers=manager_headers, json=PROPERTY_PAYLOAD)
        assert response.status_code == 403

    def test_duplicate_slug(self, client: TestClient, admin_headers, sample_property):
        payload = dict(PROPERTY_PAYLOAD, slug=sample_property.slug)
        response = client.post("/properties", headers=admin_headers, json=payload)
        assert response.status_code == 409

    def test_invalid_slug(self, client: TestClient, admin_headers):
        payload = dict(PROPERTY_PAYLOAD, slug="Not A Slug")
        response = client.post("/properties", headers=admin_headers, json=payload)
        assert response.status_code == 422

    def test_get_detail(self, client: TestClient, staff_headers, sample_rooms, make_reservation):
        make_reservation()
        response = client.get("/properties/tropicana-boracay", headers=staff_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["room_types"][0]["room_count"] == 2
        assert len(data["rooms"]) == 2
        assert len(data["recent_reservations"]) == 1
        assert data["counts"]["reservations"] == 1

    def test_get_unknown_property(self, client: TestClient, staff_headers):
        response = client.get("/properties/nowhere", headers=staff_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Property not found"

    def test_update_property(self, client: TestClient, admin_headers, sample_property):
        response = client.patch("/properties/tropicana-boracay", headers=admin_headers,
                                json={"cancellation_hours": 48})
        assert response.status_code == 200
        assert response.json()["cancellation_hours"] == 48

    def test_delete_property(self, client: TestClient, admin_headers, sample_rooms):
        response = client.delete("/properties/tropicana-boracay", headers=admin_headers)
        assert response.status_code == 204

        response = client.get("/properties/tropicana-boracay", headers=admin_headers)
        assert response.status_code == 404


class TestRoomTypes:

    def test_create_room_type(self, client: TestClient, manager_headers, sample_property):
        response = client.post("/properties/tropicana-boracay/room-types", headers=manager_headers, json={
            "name": "ocean-suite",
            "display_name": "Ocean View Suite",
            "category": "SUITE",
            "base_rate": "8500.00",
            "max_occupancy": 4,
        })

        assert response.status_code == 201
        data = response.json()
        assert data["room_count"] == 0
        assert Decimal(data["base_rate"]) == Decimal("8500.00")

    def test_duplicate_room_type_name(self, client: TestClient, manager_headers, sample_room_type):
        response = client.post("/properties/tropicana-boracay/room-types", headers=manager_headers, json={
            "name": "deluxe",
            "display_name": "Another Deluxe",
            "base_rate": "1200.00",
        })
        assert response.status_code == 409

    def test_delete_room_type_with_rooms(self, client: TestClient, manager_headers, sample_room_type, sample_rooms):
        response = client.delete(f"/room-types/{sample_room_type.id}", headers=manager_headers)
        assert response.status_code == 400

    def test_link_and_unlink_amenity(self, client: TestClient, manager_headers, sample_property, sample_room_type):
        response = client.post("/amenities", headers=manager_headers, json={
            "property_id": sample_property.id,
            "name": "Infinity Pool",
        })
        assert response.status_code == 201
        amenity_id = response.json()["id"]

        response = client.post(f"/room-types/{sample_room_type.id}/amenities", headers=manager_headers,
                               json={"amenity_id": amenity_id})
        assert response.status_code == 201
        assert [a["name"] for a in response.json()["amenities"]] == ["Infinity Pool"]

        response = client.post(f"/room-types/{sample_room_type.id}/amenities", headers=manager_headers,
                               json={"amenity_id": amenity_id})
        assert response.status_code == 409

        response = client.delete(f"/room-types/{sample_room_type.id}/amenities/{amenity_id}",
                                 headers=manager_headers)
        assert response.status_code == 204

    def test_delete_linked_amenity(self, client: TestClient, manager_headers, sample_property, sample_room_type):
        amenity_id = client.post("/amenities", headers=manager_headers, json={
            "property_id": sample_property.id, "name": "Spa",
        }).json()["id"]
        client.post(f"/room-types/{sample_room_type.id}/amenities", headers=manager_headers,
                    json={"amenity_id": amenity_id})

        response = client.delete(f"/amenities/{amenity_id}", headers=manager_headers)
        assert response.status_code == 204

        response = client.get(f"/room-types/{sample_room_type.id}", headers=manager_headers)
        assert response.json()["amenities"] == []


class TestRooms:

    def test_create_room(self, client: TestClient, manager_headers, sample_room_type):
        response = client.post("/properties/tropicana-boracay/rooms", headers=manager_headers, json={
            "room_type_id": sample_room_type.id,
            "room_number": "201",
            "floor": 2,
        })

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "AVAILABLE"
        assert data["housekeeping"] == "CLEAN"

    def test_duplicate_room_number(self, client: TestClient, manager_headers, sample_room_type, sample_rooms):
        response = client.post("/properties/tropicana-boracay/rooms", headers=manager_headers, json={
            "room_type_id": sample_room_type.id,
            "room_number": "101",
        })
        assert response.status_code == 409

    def test_filter_rooms_by_status(self, client: TestClient, staff_headers, sample_rooms):
        response = client.patch(f"/rooms/{sample_rooms[0].id}", headers=staff_headers,
                                json={"status": "MAINTENANCE"})
        assert response.status_code == 200

        response = client.get("/rooms", headers=staff_headers, params={"status": "MAINTENANCE"})
        assert [r["room_number"] for r in response.json()] == ["101"]

    def test_delete_room_requires_manager(self, client: TestClient, staff_headers, sample_rooms):
        response = client.delete(f"/rooms/{sample_rooms[0].id}", headers=staff_headers)
        assert response.status_code == 403


class TestRates:

    def test_quote_uses_base_rate(self, client: TestClient, sample_room_type, stay_dates):
        check_in, check_out = stay_dates
        response = client.get("/rates/quote", params={
            "room_type_id": sample_room_type.id,
            "check_in": check_in.isoformat(),
            "check_out": check_out.isoformat(),
        })

        assert response.status_code == 200
        data = response.json()
        assert data["nights"] == 2
        assert Decimal(data["subtotal"]) == Decimal("2000.00")
        assert Decimal(data["taxes"]) == Decimal("240.00")
        assert Decimal(data["service_fee"]) == Decimal("100.00")
        assert Decimal(data["total_amount"]) == Decimal("2340.00")

    def test_quote_with_seasonal_rate(self, client: TestClient, manager_headers, sample_room_type, stay_dates):
        check_in, check_out = stay_dates
        response = client.post("/rates", headers=manager_headers, json={
            "room_type_id": sample_room_type.id,
            "name": "Peak",
            "base_rate": "1500.00",
            "valid_from": check_in.isoformat(),
            "valid_to": check_in.isoformat(),
            "priority": 5,
        })
        assert response.status_code == 201

        data = client.get("/rates/quote", params={
            "room_type_id": sample_room_type.id,
            "check_in": check_in.isoformat(),
            "check_out": check_out.isoformat(),
        }).json()
        rates = [Decimal(n["rate"]) for n in data["nightly_rates"]]
        assert rates == [Decimal("1500.00"), Decimal("1000.00")]
        assert data["nightly_rates"][0]["rate_name"] == "Peak"

    def test_rate_with_inverted_range(self, client: TestClient, manager_headers, sample_room_type):
        response = client.post("/rates", headers=manager_headers, json={
            "room_type_id": sample_room_type.id,
            "name": "Broken",
            "base_rate": "900.00",
            "valid_from": "2030-05-10",
            "valid_to": "2030-05-01",
        })
        assert response.status_code == 422


class TestAvailability:

    def _search(self, client, prop, check_in, check_out, adults=2):
        return client.get("/availability", params={
            "property_id": prop.id,
            "check_in": check_in.isoformat(),
            "check_out": check_out.isoformat(),
            "adults": adults,
        })

    def test_all_rooms_free(self, client: TestClient, sample_property, sample_rooms, stay_dates):
        response = self._search(client, sample_property, *stay_dates)

        assert response.status_code == 200
        data = response.json()
        assert data["nights"] == 2
        assert data["room_types"][0]["available_count"] == 2

    def test_booked_rooms_are_subtracted(self, client: TestClient, sample_property, sample_rooms,
                                         make_reservation, stay_dates):
        make_reservation()
        data = self._search(client, sample_property, *stay_dates).json()
        assert data["room_types"][0]["booked_rooms"] == 1
        assert data["room_types"][0]["available_count"] == 1

    def test_back_to_back_stay_does_not_conflict(self, client: TestClient, sample_property, sample_rooms,
                                                 make_reservation, stay_dates):
        make_reservation()
        make_reservation()
        check_in = stay_dates[1]
        data = self._search(client, sample_property, check_in, check_in + timedelta(days=1)).json()
        assert data["room_types"][0]["available_count"] == 2

    def test_cancelled_reservations_release_rooms(self, client: TestClient, sample_property, sample_rooms,
                                                  make_reservation, stay_dates):
        from tropicana.models.enums import ReservationStatus
        make_reservation(status=ReservationStatus.CANCELLED)
        make_reservation(status=ReservationStatus.CANCELLED)
        data = self._search(client, sample_property, *stay_dates).json()
        assert data["room_types"][0]["available_count"] == 2

    def test_party_too_large(self, client: TestClient, sample_property, sample_rooms, stay_dates):
        data = self._search(client, sample_property, *stay_dates, adults=4).json()
        assert data["room_types"] == []

    def test_invalid_dates(self, client: TestClient, sample_property, sample_rooms):
        today = date.today()
        response = self._search(client, sample_property, today, today)
        assert response.status_code == 400

"""
Guest API tests
"""
from fastapi.testclient import TestClient


class TestGuests:

    def test_create_guest_lowercases_email(self, client: TestClient, staff_headers, sample_property):
        response = client.post("/guests", headers=staff_headers, json={
            "property_id": sample_property.id,
            "first_name": "James",
            "last_name": "Walker",
            "email": "James.Walker@Example.com",
        })

        assert response.status_code == 201
        assert response.json()["email"] == "james.walker@example.com"

    def test_duplicate_email_per_property(self, client: TestClient, staff_headers, sample_guest):
        response = client.post("/guests", headers=staff_headers, json={
            "property_id": sample_guest.property_id,
            "first_name": "Other",
            "last_name": "Person",
            "email": "MARIA@example.com",
        })
        assert response.status_code == 409

    def test_search(self, client: TestClient, staff_headers, sample_guest):
        response = client.get("/guests", headers=staff_headers,
                              params={"property_id": sample_guest.property_id, "search": "sant"})
        assert [g["last_name"] for g in response.json()] == ["Santos"]

        response = client.get("/guests", headers=staff_headers,
                              params={"property_id": sample_guest.property_id, "search": "nobody"})
        assert response.json() == []

    def test_update_guest(self, client: TestClient, staff_headers, sample_guest):
        response = client.patch(f"/guests/{sample_guest.id}", headers=staff_headers,
                                json={"vip_status": True, "phone": "+639170000000"})
        assert response.status_code == 200
        assert response.json()["vip_status"] is True

    def test_delete_guest_with_reservations(self, client: TestClient, manager_headers, sample_guest, make_reservation):
        make_reservation()
        response = client.delete(f"/guests/{sample_guest.id}", headers=manager_headers)
        assert response.status_code == 409

    def test_delete_guest(self, client: TestClient, manager_headers, sample_guest):
        response = client.delete(f"/guests/{sample_guest.id}", headers=manager_headers)
        assert response.status_code == 204

    def test_reservation_history(self, client: TestClient, staff_headers, sample_guest, make_reservation):
        first = make_reservation()
        second = make_reservation()
        response = client.get(f"/guests/{sample_guest.id}/reservations", headers=staff_headers)

        assert response.status_code == 200
        ids = {r["id"] for r in response.json()}
        assert ids == {first.id, second.id}

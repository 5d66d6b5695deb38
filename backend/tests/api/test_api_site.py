"""
Website administration API tests
Navigation menus, offers, testimonials, FAQs, feedback and site settings
"""
from datetime import date, timedelta
from fastapi.testclient import TestClient


class TestNavigation:

    def test_menu_with_items(self, client: TestClient, manager_headers, staff_headers):
        menu = client.post("/navigations", headers=manager_headers,
                           json={"name": "Main", "slug": "main", "location": "header"}).json()

        parent = client.post(f"/navigations/{menu['id']}/items", headers=manager_headers,
                             json={"label": "Stay", "url": "/properties"})
        assert parent.status_code == 201
        child = client.post(f"/navigations/{menu['id']}/items", headers=manager_headers,
                            json={"label": "Boracay", "url": "/properties/tropicana-boracay",
                                  "parent_id": parent.json()["id"]})
        assert child.status_code == 201

        detail = client.get(f"/navigations/{menu['id']}", headers=staff_headers).json()
        assert {i["label"] for i in detail["items"]} == {"Stay", "Boracay"}

    def test_item_needs_destination(self, client: TestClient, manager_headers):
        menu = client.post("/navigations", headers=manager_headers, json={"name": "Footer", "slug": "footer"}).json()
        response = client.post(f"/navigations/{menu['id']}/items", headers=manager_headers, json={"label": "Nowhere"})
        assert response.status_code == 422

    def test_item_cannot_parent_itself(self, client: TestClient, manager_headers):
        menu = client.post("/navigations", headers=manager_headers, json={"name": "Main", "slug": "main"}).json()
        item = client.post(f"/navigations/{menu['id']}/items", headers=manager_headers,
                           json={"label": "Home", "url": "/"}).json()

        response = client.patch(f"/navigations/{menu['id']}/items/{item['id']}", headers=manager_headers,
                                json={"parent_id": item["id"]})
        assert response.status_code == 400

    def test_duplicate_menu_slug(self, client: TestClient, manager_headers):
        client.post("/navigations", headers=manager_headers, json={"name": "Main", "slug": "main"})
        response = client.post("/navigations", headers=manager_headers, json={"name": "Main 2", "slug": "main"})
        assert response.status_code == 409

    def test_staff_cannot_edit_menus(self, client: TestClient, staff_headers):
        response = client.post("/navigations", headers=staff_headers, json={"name": "Main", "slug": "main"})
        assert response.status_code == 403


class TestOffers:

    def offer(self, prop, **extra):
        payload = {
            "property_id": prop.id,
            "title": "Summer Escape",
            "slug": "summer-escape",
            "offer_price": "4500.00",
            "original_price": "6000.00",
            "valid_from": date.today().isoformat(),
            "valid_to": (date.today() + timedelta(days=30)).isoformat(),
            "inclusions": ["Breakfast", "Island hopping"],
        }
        payload.update(extra)
        return payload

    def test_create_and_filter(self, client: TestClient, manager_headers, staff_headers, sample_property):
        response = client.post("/offers", headers=manager_headers, json=self.offer(sample_property))
        assert response.status_code == 201
        assert response.json()["inclusions"] == ["Breakfast", "Island hopping"]

        listed = client.get("/offers", headers=staff_headers,
                            params={"property_id": sample_property.id, "status": "ACTIVE"}).json()
        assert [o["slug"] for o in listed] == ["summer-escape"]

    def test_inverted_validity(self, client: TestClient, manager_headers, sample_property):
        response = client.post("/offers", headers=manager_headers, json=self.offer(
            sample_property, valid_to=(date.today() - timedelta(days=1)).isoformat()
        ))
        assert response.status_code == 422

    def test_slug_unique_per_property(self, client: TestClient, manager_headers, sample_property):
        client.post("/offers", headers=manager_headers, json=self.offer(sample_property))
        response = client.post("/offers", headers=manager_headers, json=self.offer(sample_property))
        assert response.status_code == 409

    def test_update_keeps_window_valid(self, client: TestClient, manager_headers, sample_property):
        offer_id = client.post("/offers", headers=manager_headers, json=self.offer(sample_property)).json()["id"]
        response = client.patch(f"/offers/{offer_id}", headers=manager_headers,
                                json={"valid_from": (date.today() + timedelta(days=60)).isoformat()})
        assert response.status_code == 400


class TestTestimonialsAndFaqs:

    def test_testimonial_filters(self, client: TestClient, manager_headers, staff_headers):
        client.post("/testimonials", headers=manager_headers,
                    json={"guest_name": "Liza", "content": "Loved it", "is_featured": True})
        client.post("/testimonials", headers=manager_headers,
                    json={"guest_name": "Tom", "content": "Hidden", "is_active": False})

        featured = client.get("/testimonials", headers=staff_headers, params={"featured_only": True}).json()
        assert [t["guest_name"] for t in featured] == ["Liza"]
        active = client.get("/testimonials", headers=staff_headers, params={"active_only": True}).json()
        assert [t["guest_name"] for t in active] == ["Liza"]

    def test_rating_range(self, client: TestClient, manager_headers):
        response = client.post("/testimonials", headers=manager_headers,
                               json={"guest_name": "Liza", "content": "Great", "rating": 6})
        assert response.status_code == 422

    def test_faq_category_filter(self, client: TestClient, manager_headers, staff_headers):
        client.post("/faqs", headers=manager_headers,
                    json={"question": "Check-in time?", "answer": "2 PM", "category": "stay"})
        client.post("/faqs", headers=manager_headers,
                    json={"question": "Airport transfer?", "answer": "Yes", "category": "transport"})

        response = client.get("/faqs", headers=staff_headers, params={"category": "transport"})
        assert [f["question"] for f in response.json()] == ["Airport transfer?"]


class TestFeedback:

    def test_public_submission(self, client: TestClient, staff_headers):
        response = client.post("/feedbacks", json={
            "content": "The pool was amazing", "name": "Jo", "email": "jo@example.com", "category": "COMPLIMENT",
        })
        assert response.status_code == 201
        assert response.json()["status"] == "NEW"

        feedback_id = response.json()["id"]
        response = client.patch(f"/feedbacks/{feedback_id}", headers=staff_headers,
                                json={"status": "RESOLVED", "response": "Thank you!"})
        assert response.json()["status"] == "RESOLVED"

        assert client.get("/feedbacks", headers=staff_headers, params={"status": "NEW"}).json() == []

    def test_listing_requires_staff(self, client: TestClient):
        assert client.get("/feedbacks").status_code in (401, 403)


class TestSettings:

    def test_settings_lifecycle(self, client: TestClient, admin_headers, staff_headers):
        assert client.get("/settings", headers=staff_headers).status_code == 404

        response = client.post("/settings", headers=admin_headers, json={
            "site_name": "Tropicana", "company_name": "Tropicana Resorts Inc.",
            "primary_email": "", "primary_color": "#0EA5E9",
        })
        assert response.status_code == 201
        assert response.json()["primary_email"] is None

        again = client.post("/settings", headers=admin_headers,
                            json={"site_name": "X", "company_name": "Y"})
        assert again.status_code == 409

        updated = client.patch("/settings", headers=admin_headers, json={"tagline": "Island living"})
        assert updated.json()["tagline"] == "Island living"
        assert client.get("/settings", headers=staff_headers).json()["site_name"] == "Tropicana"

    def test_invalid_color(self, client: TestClient, admin_headers):
        response = client.post("/settings", headers=admin_headers,
                               json={"site_name": "T", "company_name": "T", "primary_color": "blue"})
        assert response.status_code == 422

    def test_writes_are_admin_only(self, client: TestClient, manager_headers):
        response = client.post("/settings", headers=manager_headers, json={"site_name": "T", "company_name": "T"})
        assert response.status_code == 403

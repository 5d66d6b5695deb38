"""
Public website API tests
"""
from datetime import date, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from tropicana.models.hotel import Property, Amenity, RoomTypeAmenity, RoomRate
from tropicana.models.cms import Page, BlogPost, SpecialOffer, Testimonial, FAQ, WebsiteConfiguration
from tropicana.models.enums import PropertyType, PublishStatus, OfferStatus


@pytest.fixture
def hidden_property(db_session):
    prop = Property(name="Tropicana Cebu", display_name="Tropicana Cebu", slug="tropicana-cebu",
                    property_type=PropertyType.HOTEL, city="Cebu", is_published=False)
    db_session.add(prop)
    db_session.commit()
    return prop


@pytest.fixture
def pool(db_session, sample_property, sample_room_type):
    amenity = Amenity(property_id=sample_property.id, name="Infinity pool", sort_order=1)
    hidden = Amenity(property_id=sample_property.id, name="Old gym", is_active=False, sort_order=2)
    db_session.add_all([amenity, hidden])
    db_session.flush()
    db_session.add_all([
        RoomTypeAmenity(room_type_id=sample_room_type.id, amenity_id=amenity.id),
        RoomTypeAmenity(room_type_id=sample_room_type.id, amenity_id=hidden.id),
    ])
    db_session.commit()
    return amenity


def live_offer(prop, slug="summer-escape", **extra):
    fields = dict(
        property_id=prop.id, title="Summer Escape", slug=slug,
        valid_from=date.today() - timedelta(days=1), valid_to=date.today() + timedelta(days=30),
        status=OfferStatus.ACTIVE, is_published=True, is_featured=True,
    )
    fields.update(extra)
    return SpecialOffer(**fields)


class TestPublicProperties:

    def test_only_published_properties(self, client: TestClient, sample_property, hidden_property):
        response = client.get("/public/properties")

        assert response.status_code == 200
        assert [p["slug"] for p in response.json()] == ["tropicana-boracay"]

    def test_city_filter(self, client: TestClient, sample_property):
        assert len(client.get("/public/properties", params={"city": "malay"}).json()) == 1
        assert client.get("/public/properties", params={"city": "Cebu"}).json() == []

    def test_unpublished_detail_is_hidden(self, client: TestClient, hidden_property):
        assert client.get("/public/properties/tropicana-cebu").status_code == 404

    def test_detail(self, client: TestClient, db_session, sample_property, sample_room_type, pool):
        db_session.add_all([
            live_offer(sample_property),
            live_offer(sample_property, slug="expired", valid_to=date.today() - timedelta(days=1)),
            live_offer(sample_property, slug="draft", is_published=False),
        ])
        db_session.commit()

        response = client.get("/public/properties/tropicana-boracay")
        assert response.status_code == 200
        data = response.json()
        assert data["amenity_names"] == ["Infinity pool"]
        assert [o["slug"] for o in data["offers"]] == ["summer-escape"]
        room_type = data["room_types"][0]
        assert room_type["display_name"] == "Deluxe Room"
        assert [a["name"] for a in room_type["amenities"]] == ["Infinity pool"]


class TestPublicRooms:

    def test_starting_rate_uses_cheapest_current_rate(self, client: TestClient, db_session,
                                                      sample_property, sample_room_type):
        today = date.today()
        db_session.add_all([
            RoomRate(room_type_id=sample_room_type.id, name="Rainy season", base_rate=Decimal("850.00"),
                     valid_from=today, valid_to=today + timedelta(days=60)),
            RoomRate(room_type_id=sample_room_type.id, name="Last year", base_rate=Decimal("500.00"),
                     valid_from=today - timedelta(days=400), valid_to=today - timedelta(days=300)),
            RoomRate(room_type_id=sample_room_type.id, name="Disabled", base_rate=Decimal("100.00"),
                     valid_from=today, valid_to=today + timedelta(days=10), is_active=False),
        ])
        db_session.commit()

        rooms = client.get("/public/properties/tropicana-boracay/rooms").json()
        assert Decimal(rooms[0]["starting_rate"]) == Decimal("850.00")

    def test_starting_rate_defaults_to_base_rate(self, client: TestClient, sample_room_type):
        rooms = client.get("/public/properties/tropicana-boracay/rooms").json()
        assert Decimal(rooms[0]["starting_rate"]) == Decimal("1000.00")

    def test_room_type_detail_has_policies(self, client: TestClient, sample_room_type):
        response = client.get(f"/public/properties/tropicana-boracay/rooms/{sample_room_type.id}")

        assert response.status_code == 200
        policies = response.json()["policies"]
        assert policies["check_in_time"] == "15:00"
        assert policies["cancellation_hours"] == 24

    def test_inactive_room_type_is_hidden(self, client: TestClient, db_session, sample_room_type):
        sample_room_type.is_active = False
        db_session.commit()

        assert client.get("/public/properties/tropicana-boracay/rooms").json() == []
        response = client.get(f"/public/properties/tropicana-boracay/rooms/{sample_room_type.id}")
        assert response.status_code == 404


class TestPublicContent:

    def test_home(self, client: TestClient, db_session, sample_property):
        db_session.add_all([
            WebsiteConfiguration(site_name="Tropicana", company_name="Tropicana Resorts Inc."),
            Page(title="Welcome", slug="home", status=PublishStatus.PUBLISHED, is_home_page=True),
            live_offer(sample_property),
            Testimonial(guest_name="Liza", content="Paradise", is_featured=True),
            Testimonial(guest_name="Tom", content="Nice", is_featured=False),
            FAQ(question="Check-in?", answer="3 PM"),
            FAQ(question="Old?", answer="Hidden", is_active=False),
        ])
        db_session.commit()

        data = client.get("/public/home").json()
        assert data["config"]["site_name"] == "Tropicana"
        assert data["home_page"]["slug"] == "home"
        assert [p["slug"] for p in data["featured_properties"]] == ["tropicana-boracay"]
        assert [o["slug"] for o in data["featured_offers"]] == ["summer-escape"]
        assert [t["guest_name"] for t in data["testimonials"]] == ["Liza"]
        assert [f["question"] for f in data["faqs"]] == ["Check-in?"]

    def test_empty_home(self, client: TestClient):
        data = client.get("/public/home").json()
        assert data["config"] is None
        assert data["home_page"] is None

    def test_draft_page_is_hidden(self, client: TestClient, db_session):
        db_session.add_all([
            Page(title="About", slug="about", status=PublishStatus.PUBLISHED),
            Page(title="Secret", slug="secret", status=PublishStatus.DRAFT),
        ])
        db_session.commit()

        assert client.get("/public/pages/about").json()["title"] == "About"
        assert client.get("/public/pages/secret").status_code == 404

    def test_blog_view_counter(self, client: TestClient, db_session):
        db_session.add_all([
            BlogPost(title="Island hopping", slug="island-hopping", content="Boats",
                     status=PublishStatus.PUBLISHED, view_count=0, tags=["boracay"]),
            BlogPost(title="Draft", slug="draft", content="Soon", status=PublishStatus.DRAFT),
        ])
        db_session.commit()

        assert [p["slug"] for p in client.get("/public/blog").json()] == ["island-hopping"]
        client.get("/public/blog/island-hopping")
        assert client.get("/public/blog/island-hopping").json()["view_count"] == 2
        assert client.get("/public/blog/draft").status_code == 404

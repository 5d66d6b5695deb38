"""
Seed data script
Creates: users and system roles, two properties with room types, rooms, rates
and amenities, the website configuration and starter content.

Default accounts (password asdasd123):
  admin    Administrator   ADMIN
  staff    Front Desk      STAFF (Tropicana Boracay)

Run with:  python -m tropicana.seed
"""
import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from tropicana.database import Base, SessionLocal, init_db
from tropicana.logging_config import configure_logging
from tropicana.models.hotel import Property, RoomType, Room, RoomRate, Amenity, RoomTypeAmenity
from tropicana.models.cms import (
    Page, SpecialOffer, Testimonial, FAQ, WebsiteConfiguration
)
from tropicana.models.users import User, Role, UserRoleAssignment
from tropicana.models.enums import (
    PropertyType, RoomCategory, OfferType, PublishStatus, ContentType
)
from tropicana.security.auth import get_password_hash, ADMIN, MANAGER, STAFF

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD = "asdasd123"

PROPERTIES = [
    {
        "name": "Tropicana Boracay",
        "display_name": "Tropicana Boracay Beach Resort",
        "slug": "tropicana-boracay",
        "property_type": PropertyType.RESORT,
        "city": "Malay",
        "state": "Aklan",
        "short_description": "Beachfront resort on White Beach",
        "tax_rate": Decimal("0.1200"),
        "service_fee_rate": Decimal("0.0500"),
        "is_featured": True,
        "room_types": [
            ("deluxe", "Deluxe Room", RoomCategory.DELUXE, Decimal("4500.00"), 2, ["101", "102", "103", "104"]),
            ("ocean-suite", "Ocean View Suite", RoomCategory.SUITE, Decimal("8500.00"), 4, ["201", "202"]),
        ],
        "amenities": ["Infinity Pool", "Beach Access", "Free Wi-Fi", "Spa"],
    },
    {
        "name": "Tropicana Cebu",
        "display_name": "Tropicana Cebu City Hotel",
        "slug": "tropicana-cebu",
        "property_type": PropertyType.HOTEL,
        "city": "Cebu City",
        "state": "Cebu",
        "short_description": "Business hotel in the heart of the city",
        "tax_rate": Decimal("0.1200"),
        "service_fee_rate": Decimal("0.1000"),
        "is_featured": False,
        "room_types": [
            ("standard", "Standard Room", RoomCategory.STANDARD, Decimal("2800.00"), 2, ["301", "302", "303"]),
            ("family", "Family Room", RoomCategory.FAMILY, Decimal("5200.00"), 5, ["401", "402"]),
        ],
        "amenities": ["Business Center", "Free Wi-Fi", "Fitness Gym"],
    },
]


def clean_tables(db):
    """Delete every row, children before parents"""
    for table in reversed(Base.metadata.sorted_tables):
        db.execute(table.delete())
    db.commit()


def init_users(db):
    """Users, system roles and their assignments"""
    roles = {}
    for name, display_name in ((ADMIN, "Administrator"), (MANAGER, "Manager"), (STAFF, "Staff")):
        role = Role(name=name, display_name=display_name, is_system=True)
        db.add(role)
        roles[name] = role

    admin = User(
        email="admin@tropicana.ph", username="admin", first_name="System", last_name="Administrator",
        password_hash=get_password_hash(DEFAULT_PASSWORD),
    )
    staff = User(
        email="frontdesk@tropicana.ph", username="staff", first_name="Front", last_name="Desk",
        password_hash=get_password_hash(DEFAULT_PASSWORD),
    )
    db.add_all([admin, staff])
    db.flush()

    db.add(UserRoleAssignment(user_id=admin.id, role_id=roles[ADMIN].id))
    db.flush()
    return admin, staff, roles


def init_property(db, data, created_by):
    """One property with its room types, rooms, rates and amenities"""
    prop = Property(
        name=data["name"],
        display_name=data["display_name"],
        slug=data["slug"],
        property_type=data["property_type"],
        city=data["city"],
        state=data["state"],
        short_description=data["short_description"],
        tax_rate=data["tax_rate"],
        service_fee_rate=data["service_fee_rate"],
        is_published=True,
        is_featured=data["is_featured"],
        created_by=created_by,
    )
    db.add(prop)
    db.flush()

    amenities = []
    for index, name in enumerate(data["amenities"]):
        amenity = Amenity(property_id=prop.id, name=name, sort_order=index)
        db.add(amenity)
        amenities.append(amenity)
    db.flush()

    today = date.today()
    for index, (name, display_name, category, base_rate, occupancy, numbers) in enumerate(data["room_types"]):
        room_type = RoomType(
            property_id=prop.id,
            name=name,
            display_name=display_name,
            category=category,
            base_rate=base_rate,
            max_occupancy=occupancy,
            max_adults=occupancy,
            sort_order=index,
        )
        db.add(room_type)
        db.flush()

        for amenity in amenities:
            db.add(RoomTypeAmenity(room_type_id=room_type.id, amenity_id=amenity.id))

        for number in numbers:
            db.add(Room(property_id=prop.id, room_type_id=room_type.id,
                        room_number=number, floor=int(number[0])))

        # Weekend premium for the coming year
        db.add(RoomRate(
            room_type_id=room_type.id,
            name="Weekend",
            base_rate=(base_rate * Decimal("1.20")).quantize(Decimal("0.01")),
            valid_from=today,
            valid_to=today + timedelta(days=365),
            monday=False, tuesday=False, wednesday=False, thursday=False,
            friday=True, saturday=True, sunday=False,
            priority=10,
        ))
    db.flush()
    return prop


def init_content(db, boracay, author_id):
    """Site configuration, FAQs, testimonials, an offer and the home page"""
    today = date.today()
    db.add(WebsiteConfiguration(
        site_name="Tropicana",
        company_name="Tropicana Hotels & Resorts Inc.",
        tagline="Island living, done right",
        primary_email="hello@tropicana.ph",
        primary_phone="+63 2 8123 4567",
        headquarters="Makati City, Metro Manila",
        primary_color="#0E7C86",
        secondary_color="#F2C14E",
    ))

    faqs = [
        ("What time is check-in?", "Check-in starts at 3:00 PM and check-out is until 12:00 NN.", "Stay"),
        ("Can I cancel my booking?", "Free cancellation up to 24 hours before arrival.", "Booking"),
        ("Which payment methods do you accept?", "Cards, GCash and GrabPay through our secure checkout.", "Payment"),
    ]
    for index, (question, answer, category) in enumerate(faqs):
        db.add(FAQ(question=question, answer=answer, category=category, sort_order=index))

    db.add_all([
        Testimonial(guest_name="Maria Santos", guest_country="Philippines", rating=5,
                    content="The sunset from the ocean suite was unforgettable.",
                    source="Google", is_featured=True, property_id=boracay.id),
        Testimonial(guest_name="James Walker", guest_country="Australia", rating=4,
                    content="Friendly staff and a great breakfast buffet.",
                    source="TripAdvisor", is_featured=True, property_id=boracay.id),
    ])

    db.add(SpecialOffer(
        property_id=boracay.id,
        title="Summer Escape",
        slug="summer-escape",
        description="Three nights in a Deluxe Room with daily breakfast and airport transfers.",
        type=OfferType.PACKAGE,
        offer_price=Decimal("12000.00"),
        original_price=Decimal("15300.00"),
        valid_from=today,
        valid_to=today + timedelta(days=90),
        min_nights=3,
        inclusions=["Daily breakfast for two", "Round-trip airport transfers"],
        is_published=True,
        is_featured=True,
    ))

    db.add(Page(
        title="Welcome to Tropicana",
        slug="home",
        content="<h1>Welcome to Tropicana</h1><p>Beach resorts and city hotels across the islands.</p>",
        content_type=ContentType.PAGE,
        is_home_page=True,
        status=PublishStatus.PUBLISHED,
        published_at=datetime.utcnow(),
        author_id=author_id,
    ))


def main():
    configure_logging()
    init_db()
    db = SessionLocal()
    try:
        clean_tables(db)
        admin, staff, roles = init_users(db)
        properties = [init_property(db, data, admin.id) for data in PROPERTIES]
        db.add(UserRoleAssignment(user_id=staff.id, role_id=roles[STAFF].id,
                                  property_id=properties[0].id, assigned_by=admin.id))
        init_content(db, properties[0], admin.id)
        db.commit()
        logger.info(f"Seeded {len(properties)} properties; log in as admin / {DEFAULT_PASSWORD}")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()

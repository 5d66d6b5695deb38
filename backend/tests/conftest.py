"""
Pytest configuration and shared fixtures
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from datetime import date, timedelta
from decimal import Decimal
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from tropicana.database import Base, get_db
from tropicana.models.hotel import Property, RoomType, Room
from tropicana.models.booking import Guest, Reservation, ReservationRoom
from tropicana.models.users import User, Role, UserRoleAssignment
from tropicana.models.enums import (
    PropertyType, RoomCategory, ReservationStatus, ReservationSource
)
from tropicana.integrations.paymongo import get_paymongo_client
from tropicana.services.exceptions import PaymentGatewayError
from tropicana.security.auth import get_password_hash, create_access_token
from tropicana.main import app


@pytest.fixture(scope="function")
def db_engine():
    """In-memory database engine"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """Test client bound to the test session"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ============== Users & auth ==============

def make_user(db, username, role_name=None, password="secret123"):
    user = User(
        email=f"{username}@example.com",
        username=username,
        password_hash=get_password_hash(password),
        first_name=username.capitalize(),
        last_name="Tester",
    )
    db.add(user)
    db.flush()
    if role_name:
        role = db.query(Role).filter(Role.name == role_name).first()
        if not role:
            role = Role(name=role_name, display_name=role_name.title(), is_system=True)
            db.add(role)
            db.flush()
        db.add(UserRoleAssignment(user_id=user.id, role_id=role.id))
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_user(db_session):
    return make_user(db_session, "admin", "ADMIN")


@pytest.fixture
def manager_user(db_session):
    return make_user(db_session, "manager", "MANAGER")


@pytest.fixture
def staff_user(db_session):
    return make_user(db_session, "front1", "STAFF")


@pytest.fixture
def admin_headers(admin_user):
    return {"Authorization": f"Bearer {create_access_token(admin_user.id, admin_user.role_names)}"}


@pytest.fixture
def manager_headers(manager_user):
    return {"Authorization": f"Bearer {create_access_token(manager_user.id, manager_user.role_names)}"}


@pytest.fixture
def staff_headers(staff_user):
    return {"Authorization": f"Bearer {create_access_token(staff_user.id, staff_user.role_names)}"}


# ============== Inventory ==============

@pytest.fixture
def sample_property(db_session):
    prop = Property(
        name="Tropicana Boracay",
        display_name="Tropicana Boracay Beach Resort",
        slug="tropicana-boracay",
        property_type=PropertyType.RESORT,
        city="Malay",
        tax_rate=Decimal("0.12"),
        service_fee_rate=Decimal("0.05"),
        is_published=True,
        is_featured=True,
    )
    db_session.add(prop)
    db_session.commit()
    db_session.refresh(prop)
    return prop


@pytest.fixture
def sample_room_type(db_session, sample_property):
    room_type = RoomType(
        property_id=sample_property.id,
        name="deluxe",
        display_name="Deluxe Room",
        category=RoomCategory.DELUXE,
        base_rate=Decimal("1000.00"),
        max_occupancy=3,
        max_adults=2,
        max_children=1,
    )
    db_session.add(room_type)
    db_session.commit()
    db_session.refresh(room_type)
    return room_type


@pytest.fixture
def sample_rooms(db_session, sample_property, sample_room_type):
    """Rooms 101 and 102 of the deluxe type"""
    rooms = [
        Room(property_id=sample_property.id, room_type_id=sample_room_type.id, room_number=number, floor=1)
        for number in ("101", "102")
    ]
    db_session.add_all(rooms)
    db_session.commit()
    for room in rooms:
        db_session.refresh(room)
    return rooms


@pytest.fixture
def sample_guest(db_session, sample_property):
    guest = Guest(
        property_id=sample_property.id,
        first_name="Maria",
        last_name="Santos",
        email="maria@example.com",
        phone="+639171234567",
    )
    db_session.add(guest)
    db_session.commit()
    db_session.refresh(guest)
    return guest


@pytest.fixture
def stay_dates():
    check_in = date.today() + timedelta(days=10)
    return check_in, check_in + timedelta(days=2)


@pytest.fixture
def make_reservation(db_session, sample_property, sample_room_type, sample_guest, stay_dates):
    """Factory for reservations of the sample guest"""
    counter = [0]

    def _make(status=ReservationStatus.CONFIRMED, room=None, check_in=None, check_out=None,
              total=Decimal("2340.00")):
        counter[0] += 1
        check_in = check_in or stay_dates[0]
        check_out = check_out or stay_dates[1]
        nights = (check_out - check_in).days
        reservation = Reservation(
            property_id=sample_property.id,
            guest_id=sample_guest.id,
            confirmation_number=f"TR-TEST{counter[0]:04d}",
            source=ReservationSource.ADMIN,
            status=status,
            check_in=check_in,
            check_out=check_out,
            nights=nights,
            adults=2,
            subtotal=Decimal("2000.00"),
            taxes=Decimal("240.00"),
            service_fee=Decimal("100.00"),
            total_amount=total,
            currency="PHP",
        )
        reservation.rooms.append(ReservationRoom(
            room_type_id=sample_room_type.id,
            room_id=room.id if room else None,
            rate=Decimal("1000.00"),
            nights=nights,
            subtotal=Decimal("1000.00") * nights,
        ))
        db_session.add(reservation)
        db_session.commit()
        db_session.refresh(reservation)
        return reservation

    return _make


# ============== PayMongo ==============

class FakePayMongoClient:
    """Records gateway calls and returns canned PayMongo objects"""

    def __init__(self):
        self.calls = []
        self.fail_with = None

    def create_checkout_session(self, **kwargs):
        self.calls.append(("checkout_session", kwargs))
        if self.fail_with:
            raise PaymentGatewayError(self.fail_with)
        return {
            "id": "cs_test_123",
            "attributes": {
                "checkout_url": "https://checkout.paymongo.com/cs_test_123",
                "client_key": "cs_test_123_client_abc",
            },
        }

    def create_payment_intent(self, **kwargs):
        self.calls.append(("payment_intent", kwargs))
        if self.fail_with:
            raise PaymentGatewayError(self.fail_with)
        return {"id": "pi_test_456", "attributes": {"client_key": "pi_test_456_client_xyz"}}

    def close(self):
        pass


@pytest.fixture
def fake_paymongo(client):
    fake = FakePayMongoClient()
    app.dependency_overrides[get_paymongo_client] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_paymongo_client, None)

"""
Property inventory models
Property (business unit) -> RoomType -> Room, plus rates and amenities
"""
from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, Float, DateTime, Date, ForeignKey, Text,
    Boolean, Numeric, JSON, UniqueConstraint, Enum as SQLEnum
)
from sqlalchemy.orm import relationship
from tropicana.database import Base
from tropicana.models.enums import PropertyType, RoomCategory, RoomStatus, HousekeepingStatus


class Property(Base):
    """A hotel, resort or villa complex operated on the platform"""
    __tablename__ = "properties"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    display_name = Column(String(150), nullable=False)
    slug = Column(String(100), unique=True, nullable=False, index=True)
    property_type = Column(SQLEnum(PropertyType), nullable=False, default=PropertyType.HOTEL)
    description = Column(Text)
    short_description = Column(String(300))

    # Location
    address = Column(String(255))
    city = Column(String(100), nullable=False)
    state = Column(String(100))
    country = Column(String(100), default="Philippines")
    postal_code = Column(String(20))
    latitude = Column(Float)
    longitude = Column(Float)

    # Contact
    phone = Column(String(50))
    email = Column(String(150))
    website = Column(String(255))

    # Locale and money
    primary_currency = Column(String(3), default="PHP")
    secondary_currency = Column(String(3))
    timezone = Column(String(50), default="Asia/Manila")
    locale = Column(String(10), default="en")
    tax_rate = Column(Numeric(5, 4))
    service_fee_rate = Column(Numeric(5, 4))

    # Branding
    logo = Column(String(255))
    favicon = Column(String(255))
    primary_color = Column(String(7))
    secondary_color = Column(String(7))
    hero_image = Column(String(255))

    # Policies
    check_in_time = Column(String(5), default="15:00")
    check_out_time = Column(String(5), default="12:00")
    cancellation_hours = Column(Integer, default=24)
    max_advance_booking = Column(Integer, default=365)

    # Publishing
    is_published = Column(Boolean, default=False)
    is_featured = Column(Boolean, default=False)
    sort_order = Column(Integer, default=0)
    meta_title = Column(String(60))
    meta_description = Column(String(160))

    is_active = Column(Boolean, default=True)
    created_by = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    room_types = relationship("RoomType", back_populates="hotel", cascade="all, delete-orphan",
                              order_by="RoomType.sort_order")
    rooms = relationship("Room", back_populates="hotel", cascade="all, delete-orphan",
                         order_by="Room.room_number")
    amenities = relationship("Amenity", back_populates="hotel", cascade="all, delete-orphan")
    reservations = relationship("Reservation", back_populates="hotel", cascade="all, delete-orphan")
    guests = relationship("Guest", back_populates="hotel", cascade="all, delete-orphan")


class RoomType(Base):
    """A sellable room category of a property"""
    __tablename__ = "room_types"
    __table_args__ = (UniqueConstraint("property_id", "name", name="uq_room_type_property_name"),)

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    display_name = Column(String(150), nullable=False)
    category = Column(SQLEnum(RoomCategory), nullable=False, default=RoomCategory.STANDARD)
    description = Column(Text)
    base_rate = Column(Numeric(12, 2), nullable=False)

    # Occupancy
    max_occupancy = Column(Integer, default=2)
    max_adults = Column(Integer, default=2)
    max_children = Column(Integer, default=1)
    max_infants = Column(Integer, default=1)
    bed_configuration = Column(String(100))
    room_size = Column(Float)

    # Features
    has_balcony = Column(Boolean, default=False)
    has_ocean_view = Column(Boolean, default=False)
    has_pool_view = Column(Boolean, default=False)
    has_kitchenette = Column(Boolean, default=False)
    has_living_area = Column(Boolean, default=False)
    smoking_allowed = Column(Boolean, default=False)
    pet_friendly = Column(Boolean, default=False)
    is_accessible = Column(Boolean, default=False)

    extra_person_rate = Column(Numeric(12, 2))
    extra_child_rate = Column(Numeric(12, 2))

    primary_image = Column(String(255))
    images = Column(JSON, default=list)
    floor_plan = Column(String(255))

    is_active = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    hotel = relationship("Property", back_populates="room_types")
    rooms = relationship("Room", back_populates="room_type")
    rates = relationship("RoomRate", back_populates="room_type", cascade="all, delete-orphan",
                         order_by="RoomRate.priority")
    amenity_links = relationship("RoomTypeAmenity", back_populates="room_type", cascade="all, delete-orphan")

    @property
    def amenities(self):
        return [link.amenity for link in self.amenity_links]


class Amenity(Base):
    """A facility or service offered by a property"""
    __tablename__ = "amenities"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text)
    category = Column(String(50))
    icon = Column(String(100))
    is_active = Column(Boolean, default=True)
    is_chargeable = Column(Boolean, default=False)
    charge_amount = Column(Numeric(12, 2))
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    hotel = relationship("Property", back_populates="amenities")
    room_type_links = relationship("RoomTypeAmenity", back_populates="amenity", cascade="all, delete-orphan")


class RoomTypeAmenity(Base):
    """Link table between room types and amenities"""
    __tablename__ = "room_type_amenities"
    __table_args__ = (UniqueConstraint("room_type_id", "amenity_id", name="uq_room_type_amenity"),)

    id = Column(Integer, primary_key=True, index=True)
    room_type_id = Column(Integer, ForeignKey("room_types.id"), nullable=False)
    amenity_id = Column(Integer, ForeignKey("amenities.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    room_type = relationship("RoomType", back_populates="amenity_links")
    amenity = relationship("Amenity", back_populates="room_type_links")


class Room(Base):
    """A physical room"""
    __tablename__ = "rooms"
    __table_args__ = (UniqueConstraint("property_id", "room_number", name="uq_room_property_number"),)

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
    room_type_id = Column(Integer, ForeignKey("room_types.id"), nullable=False, index=True)
    room_number = Column(String(20), nullable=False)
    floor = Column(Integer)
    wing = Column(String(50))
    status = Column(SQLEnum(RoomStatus), default=RoomStatus.AVAILABLE, nullable=False)
    housekeeping = Column(SQLEnum(HousekeepingStatus), default=HousekeepingStatus.CLEAN, nullable=False)
    last_cleaned = Column(DateTime, default=datetime.utcnow)
    last_inspected = Column(DateTime)
    last_maintenance = Column(DateTime)
    out_of_order_until = Column(DateTime)
    notes = Column(Text)
    special_features = Column(JSON, default=list)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    hotel = relationship("Property", back_populates="rooms")
    room_type = relationship("RoomType", back_populates="rooms")

    @property
    def room_type_name(self) -> str:
        return self.room_type.display_name if self.room_type else None


class RoomRate(Base):
    """Seasonal or promotional nightly rate of a room type"""
    __tablename__ = "room_rates"

    id = Column(Integer, primary_key=True, index=True)
    room_type_id = Column(Integer, ForeignKey("room_types.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text)
    base_rate = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), default="PHP")
    valid_from = Column(Date, nullable=False)
    valid_to = Column(Date, nullable=False)

    # Days of week the rate applies to
    monday = Column(Boolean, default=True)
    tuesday = Column(Boolean, default=True)
    wednesday = Column(Boolean, default=True)
    thursday = Column(Boolean, default=True)
    friday = Column(Boolean, default=True)
    saturday = Column(Boolean, default=True)
    sunday = Column(Boolean, default=True)

    # Stay restrictions
    min_stay = Column(Integer, default=1)
    max_stay = Column(Integer)
    min_advance = Column(Integer)
    max_advance = Column(Integer)

    extra_person_rate = Column(Numeric(12, 2))
    child_rate = Column(Numeric(12, 2))
    is_active = Column(Boolean, default=True)
    priority = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    room_type = relationship("RoomType", back_populates="rates")

    WEEKDAY_FIELDS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

    def applies_on_weekday(self, weekday: int) -> bool:
        """weekday uses date.weekday() numbering (Monday is 0)"""
        return bool(getattr(self, self.WEEKDAY_FIELDS[weekday]))

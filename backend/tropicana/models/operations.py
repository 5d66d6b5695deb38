"""
Front-office and back-office operations
In-house stays with folio charges, staff tasks and guest service requests
"""
from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Numeric, Enum as SQLEnum
from sqlalchemy.orm import relationship
from tropicana.database import Base
from tropicana.models.enums import ServiceCategory, TaskPriority, ServiceStatus


class Stay(Base):
    """Guest stay opened at check-in"""
    __tablename__ = "stays"

    id = Column(Integer, primary_key=True, index=True)
    reservation_id = Column(Integer, ForeignKey("reservations.id"), nullable=False, index=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=False, index=True)
    actual_check_in = Column(DateTime, nullable=False, default=datetime.utcnow)
    actual_check_out = Column(DateTime)
    room_charges = Column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    extra_charges = Column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    total_charges = Column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    reservation = relationship("Reservation", back_populates="stays")
    guest = relationship("Guest")
    charges = relationship("StayCharge", back_populates="stay", cascade="all, delete-orphan",
                           order_by="StayCharge.charged_at")

    @property
    def is_active(self) -> bool:
        return self.actual_check_out is None


class StayCharge(Base):
    """Incidental charge posted to a stay folio"""
    __tablename__ = "stay_charges"

    id = Column(Integer, primary_key=True, index=True)
    stay_id = Column(Integer, ForeignKey("stays.id"), nullable=False, index=True)
    description = Column(String(255), nullable=False)
    quantity = Column(Integer, default=1, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    department = Column(String(50))
    reference = Column(String(100))
    charged_at = Column(DateTime, default=datetime.utcnow)
    created_by = Column(Integer, ForeignKey("users.id"))

    stay = relationship("Stay", back_populates="charges")


class Task(Base):
    """Staff task (housekeeping, maintenance, ...)"""
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"))
    title = Column(String(200), nullable=False)
    description = Column(Text)
    category = Column(SQLEnum(ServiceCategory), default=ServiceCategory.OTHER, nullable=False)
    priority = Column(SQLEnum(TaskPriority), default=TaskPriority.NORMAL, nullable=False)
    status = Column(SQLEnum(ServiceStatus), default=ServiceStatus.PENDING, nullable=False)
    assigned_to = Column(Integer, ForeignKey("users.id"))
    created_by = Column(Integer, ForeignKey("users.id"))
    scheduled_at = Column(DateTime)
    due_at = Column(DateTime)
    started_at = Column(DateTime)
    completed_at = Column(DateTime)
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    room = relationship("Room")
    assignee = relationship("User", foreign_keys=[assigned_to])
    creator = relationship("User", foreign_keys=[created_by])


class ServiceRequest(Base):
    """Guest-originated service request"""
    __tablename__ = "service_requests"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), index=True)
    guest_id = Column(Integer, ForeignKey("guests.id"))
    room_id = Column(Integer, ForeignKey("rooms.id"))
    title = Column(String(200), nullable=False)
    description = Column(Text)
    category = Column(SQLEnum(ServiceCategory), default=ServiceCategory.OTHER, nullable=False)
    priority = Column(SQLEnum(TaskPriority), default=TaskPriority.NORMAL, nullable=False)
    status = Column(SQLEnum(ServiceStatus), default=ServiceStatus.PENDING, nullable=False)
    assigned_to = Column(Integer, ForeignKey("users.id"))
    staff_notes = Column(Text)
    completed_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    guest = relationship("Guest")
    room = relationship("Room")

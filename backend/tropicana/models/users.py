"""
Staff accounts and role assignments
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Boolean, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship
from tropicana.database import Base
from tropicana.models.enums import UserStatus


class User(Base):
    """Back-office user"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(150), unique=True, nullable=False, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    status = Column(SQLEnum(UserStatus), default=UserStatus.ACTIVE, nullable=False)
    phone = Column(String(50))
    avatar = Column(String(255))
    timezone = Column(String(50), default="Asia/Manila")
    locale = Column(String(10), default="en")
    last_login_at = Column(DateTime)
    created_by = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    role_assignments = relationship("UserRoleAssignment", back_populates="user", cascade="all, delete-orphan",
                                    foreign_keys="UserRoleAssignment.user_id")

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    @property
    def role_names(self):
        return sorted({a.role.name for a in self.role_assignments if a.role})

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Role(Base):
    """Named role; system roles cannot be deleted"""
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False, index=True)
    display_name = Column(String(100), nullable=False)
    description = Column(Text)
    is_system = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    assignments = relationship("UserRoleAssignment", back_populates="role", cascade="all, delete-orphan")


class UserRoleAssignment(Base):
    """Grants a role to a user, optionally scoped to one property"""
    __tablename__ = "user_role_assignments"
    __table_args__ = (UniqueConstraint("user_id", "role_id", "property_id", name="uq_user_role_property"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    property_id = Column(Integer, ForeignKey("properties.id"))
    assigned_by = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="role_assignments", foreign_keys=[user_id])
    role = relationship("Role", back_populates="assignments")
    hotel = relationship("Property")

    @property
    def role_name(self) -> str:
        return self.role.name if self.role else None

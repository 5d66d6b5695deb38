"""
User service
Back-office accounts, authentication and roles
"""
import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from tropicana.models.hotel import Property
from tropicana.models.users import User, Role, UserRoleAssignment
from tropicana.models.enums import UserStatus
from tropicana.models.schemas import (
    UserCreate, UserUpdate, PasswordChange, RoleAssignmentCreate, RoleCreate, RoleUpdate
)
from tropicana.security.auth import get_password_hash, verify_password, create_access_token
from tropicana.services.exceptions import NotFoundError, ConflictError, ValidationError

logger = logging.getLogger(__name__)


class UserService:
    """User service"""

    def __init__(self, db: Session):
        self.db = db

    def get_users(self, status: Optional[UserStatus] = None) -> List[User]:
        query = self.db.query(User)
        if status:
            query = query.filter(User.status == status)
        return query.order_by(User.created_at.desc(), User.id.desc()).all()

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def require_user(self, user_id: int) -> User:
        user = self.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def get_by_login(self, login: str) -> Optional[User]:
        """Look a user up by username or email"""
        login = login.strip()
        return self.db.query(User).filter(
            (User.username == login) | (func.lower(User.email) == login.lower())
        ).first()

    def _check_unique(self, email: Optional[str], username: Optional[str],
                      exclude_id: Optional[int] = None) -> None:
        if email:
            query = self.db.query(User).filter(func.lower(User.email) == email.lower())
            if exclude_id:
                query = query.filter(User.id != exclude_id)
            if query.first():
                raise ConflictError(f"Email '{email}' is already in use")
        if username:
            query = self.db.query(User).filter(User.username == username)
            if exclude_id:
                query = query.filter(User.id != exclude_id)
            if query.first():
                raise ConflictError(f"Username '{username}' is already in use")

    def create_user(self, data: UserCreate, created_by: Optional[int] = None) -> User:
        self._check_unique(data.email, data.username)
        user_data = data.model_dump(exclude={"password"})
        user_data["email"] = user_data["email"].lower()
        user = User(**user_data, password_hash=get_password_hash(data.password), created_by=created_by)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"User {user.username} created")
        return user

    def update_user(self, user_id: int, data: UserUpdate) -> User:
        user = self.require_user(user_id)
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("email"):
            self._check_unique(update_data["email"], None, exclude_id=user.id)
            update_data["email"] = update_data["email"].lower()

        password = update_data.pop("password", None)
        if password:
            user.password_hash = get_password_hash(password)
        for key, value in update_data.items():
            setattr(user, key, value)

        self.db.commit()
        self.db.refresh(user)
        return user

    def assign_role(self, user_id: int, data: RoleAssignmentCreate,
                    assigned_by: Optional[int] = None) -> UserRoleAssignment:
        user = self.require_user(user_id)
        if not self.db.query(Role).filter(Role.id == data.role_id).first():
            raise NotFoundError("Role not found")
        if data.property_id and not self.db.query(Property).filter(Property.id == data.property_id).first():
            raise NotFoundError("Property not found")

        existing = self.db.query(UserRoleAssignment).filter(
            UserRoleAssignment.user_id == user.id,
            UserRoleAssignment.role_id == data.role_id,
            UserRoleAssignment.property_id == data.property_id,
        ).first()
        if existing:
            raise ConflictError("User already has this role")

        assignment = UserRoleAssignment(
            user_id=user.id,
            role_id=data.role_id,
            property_id=data.property_id,
            assigned_by=assigned_by,
        )
        self.db.add(assignment)
        self.db.commit()
        self.db.refresh(assignment)
        return assignment

    # ============== Authentication ==============

    def authenticate(self, login: str, password: str) -> Optional[dict]:
        """Check credentials and issue a token; None when they do not match"""
        user = self.get_by_login(login)
        if not user:
            return None

        if not verify_password(password, user.password_hash):
            return None

        if not user.is_active:
            raise ValidationError("Account is disabled")

        user.last_login_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(user)

        token = create_access_token(user.id, user.role_names)
        logger.info(f"User {user.username} logged in")
        return {
            "access_token": token,
            "token_type": "bearer",
            "user": user,
        }

    def change_password(self, user_id: int, data: PasswordChange) -> bool:
        user = self.require_user(user_id)
        if not verify_password(data.old_password, user.password_hash):
            raise ValidationError("Current password is incorrect")
        user.password_hash = get_password_hash(data.new_password)
        self.db.commit()
        return True


class RoleService:
    """Role service"""

    def __init__(self, db: Session):
        self.db = db

    def get_roles(self) -> List[dict]:
        """Roles with the number of assignments each"""
        counts = dict(
            self.db.query(UserRoleAssignment.role_id, func.count(UserRoleAssignment.id))
            .group_by(UserRoleAssignment.role_id).all()
        )
        roles = self.db.query(Role).order_by(Role.name).all()
        return [{"role": role, "user_count": counts.get(role.id, 0)} for role in roles]

    def require_role(self, role_id: int) -> Role:
        role = self.db.query(Role).filter(Role.id == role_id).first()
        if not role:
            raise NotFoundError("Role not found")
        return role

    def user_count(self, role: Role) -> int:
        return len(role.assignments)

    def _check_name(self, name: str, exclude_id: Optional[int] = None) -> None:
        query = self.db.query(Role).filter(Role.name == name)
        if exclude_id:
            query = query.filter(Role.id != exclude_id)
        if query.first():
            raise ConflictError(f"Role '{name}' already exists")

    def create_role(self, data: RoleCreate) -> Role:
        self._check_name(data.name)
        role = Role(**data.model_dump())
        self.db.add(role)
        self.db.commit()
        self.db.refresh(role)
        return role

    def update_role(self, role_id: int, data: RoleUpdate) -> Role:
        role = self.require_role(role_id)
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("name") and update_data["name"] != role.name:
            if role.is_system:
                raise ValidationError("System roles cannot be renamed")
            self._check_name(update_data["name"], exclude_id=role.id)
        for key, value in update_data.items():
            setattr(role, key, value)
        self.db.commit()
        self.db.refresh(role)
        return role

    def delete_role(self, role_id: int) -> None:
        role = self.require_role(role_id)
        if role.is_system:
            raise ValidationError("System roles cannot be deleted")
        self.db.delete(role)
        self.db.commit()

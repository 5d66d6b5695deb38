"""
Authentication, user and role routes
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from tropicana.database import get_db
from tropicana.models.users import User
from tropicana.models.enums import UserStatus
from tropicana.models.schemas import (
    LoginRequest, LoginResponse, PasswordChange, UserCreate, UserUpdate, UserResponse,
    RoleAssignmentCreate, RoleAssignmentResponse, RoleCreate, RoleUpdate, RoleResponse
)
from tropicana.services.user_service import UserService, RoleService
from tropicana.security.auth import get_current_user, require_admin

router = APIRouter(tags=["Auth"])


# ============== Session ==============

@router.post("/auth/login", response_model=LoginResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """Log in with username or email"""
    result = UserService(db).authenticate(data.username, data.password)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password"
        )
    return result


@router.get("/auth/me", response_model=UserResponse)
def get_current_user_info(current_user: User = Depends(get_current_user)):
    """The logged-in user"""
    return current_user


@router.post("/auth/change-password")
def change_password(
    data: PasswordChange,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    UserService(db).change_password(current_user.id, data)
    return {"message": "Password changed"}


# ============== Users ==============

@router.get("/users", response_model=List[UserResponse])
def list_users(
    user_status: Optional[UserStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return UserService(db).get_users(user_status)


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Create a back-office user"""
    return UserService(db).create_user(data, created_by=current_user.id)


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return UserService(db).require_user(user_id)


@router.patch("/users/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return UserService(db).update_user(user_id, data)


@router.post("/users/{user_id}/roles", response_model=RoleAssignmentResponse,
             status_code=status.HTTP_201_CREATED)
def assign_role(
    user_id: int,
    data: RoleAssignmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Grant a role, optionally scoped to one property"""
    return UserService(db).assign_role(user_id, data, assigned_by=current_user.id)


# ============== Roles ==============

def role_out(role, user_count: int) -> RoleResponse:
    return RoleResponse(
        id=role.id,
        name=role.name,
        display_name=role.display_name,
        description=role.description,
        is_system=role.is_system,
        user_count=user_count,
        created_at=role.created_at,
    )


@router.get("/roles", response_model=List[RoleResponse])
def list_roles(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Roles with their assignment counts"""
    return [role_out(item["role"], item["user_count"]) for item in RoleService(db).get_roles()]


@router.post("/roles", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
def create_role(
    data: RoleCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return role_out(RoleService(db).create_role(data), 0)


@router.get("/roles/{role_id}", response_model=RoleResponse)
def get_role(
    role_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    service = RoleService(db)
    role = service.require_role(role_id)
    return role_out(role, service.user_count(role))


@router.patch("/roles/{role_id}", response_model=RoleResponse)
def update_role(
    role_id: int,
    data: RoleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    service = RoleService(db)
    role = service.update_role(role_id, data)
    return role_out(role, service.user_count(role))


@router.delete("/roles/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_role(
    role_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Delete a custom role; system roles are refused"""
    RoleService(db).delete_role(role_id)

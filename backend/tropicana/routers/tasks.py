"""
Task and service request routes
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from tropicana.database import get_db
from tropicana.models.users import User
from tropicana.models.enums import ServiceStatus
from tropicana.models.schemas import (
    TaskCreate, TaskUpdate, TaskResponse,
    ServiceRequestCreate, ServiceRequestUpdate, ServiceRequestResponse
)
from tropicana.services.task_service import TaskService, ServiceRequestService
from tropicana.security.auth import require_staff, require_manager

router = APIRouter(tags=["Tasks"])


# ============== Tasks ==============

@router.get("/tasks", response_model=List[TaskResponse])
def list_tasks(
    property_id: Optional[int] = None,
    assigned_to: Optional[int] = None,
    task_status: Optional[ServiceStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    """Tasks, newest first"""
    return TaskService(db).get_tasks(property_id, assigned_to, task_status)


@router.post("/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    data: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return TaskService(db).create_task(data, created_by=current_user.id)


@router.get("/tasks/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return TaskService(db).require_task(task_id)


@router.patch("/tasks/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    data: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    """Update a task; status changes stamp started_at / completed_at"""
    return TaskService(db).update_task(task_id, data)


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    TaskService(db).delete_task(task_id)


# ============== Service requests ==============

@router.get("/service-requests", response_model=List[ServiceRequestResponse])
def list_service_requests(
    property_id: Optional[int] = None,
    request_status: Optional[ServiceStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return ServiceRequestService(db).get_requests(property_id, request_status)


@router.post("/service-requests", response_model=ServiceRequestResponse, status_code=status.HTTP_201_CREATED)
def create_service_request(
    data: ServiceRequestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return ServiceRequestService(db).create_request(data)


@router.get("/service-requests/{request_id}", response_model=ServiceRequestResponse)
def get_service_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return ServiceRequestService(db).require_request(request_id)


@router.patch("/service-requests/{request_id}", response_model=ServiceRequestResponse)
def update_service_request(
    request_id: int,
    data: ServiceRequestUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return ServiceRequestService(db).update_request(request_id, data)


@router.delete("/service-requests/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_service_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    ServiceRequestService(db).delete_request(request_id)

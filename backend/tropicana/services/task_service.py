"""
Task service
Staff tasks and guest service requests
"""
import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session
from tropicana.models.operations import Task, ServiceRequest
from tropicana.models.users import User
from tropicana.models.enums import ServiceStatus
from tropicana.models.schemas import (
    TaskCreate, TaskUpdate, ServiceRequestCreate, ServiceRequestUpdate
)
from tropicana.services.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _stamp_status(entity, update_data: dict) -> None:
    """Timestamp status moves unless the caller set the timestamp"""
    status = update_data.get("status")
    now = datetime.utcnow()
    if status == ServiceStatus.IN_PROGRESS and hasattr(entity, "started_at") and "started_at" not in update_data:
        entity.started_at = entity.started_at or now
    if status == ServiceStatus.COMPLETED and "completed_at" not in update_data:
        entity.completed_at = now


class TaskService:
    """Task service"""

    def __init__(self, db: Session):
        self.db = db

    def _check_assignee(self, user_id: Optional[int]) -> None:
        if user_id is None:
            return
        if not self.db.query(User).filter(User.id == user_id).first():
            raise ValidationError("Assigned user does not exist")

    def get_tasks(self, property_id: Optional[int] = None, assigned_to: Optional[int] = None,
                  status: Optional[ServiceStatus] = None) -> List[Task]:
        query = self.db.query(Task)
        if property_id:
            query = query.filter(Task.property_id == property_id)
        if assigned_to:
            query = query.filter(Task.assigned_to == assigned_to)
        if status:
            query = query.filter(Task.status == status)
        return query.order_by(Task.created_at.desc(), Task.id.desc()).all()

    def require_task(self, task_id: int) -> Task:
        task = self.db.query(Task).filter(Task.id == task_id).first()
        if not task:
            raise NotFoundError("Task not found")
        return task

    def create_task(self, data: TaskCreate, created_by: Optional[int] = None) -> Task:
        self._check_assignee(data.assigned_to)
        task = Task(**data.model_dump(), created_by=created_by)
        if task.assigned_to:
            task.status = ServiceStatus.ASSIGNED
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        logger.info(f"Task {task.id} created: {task.title}")
        return task

    def update_task(self, task_id: int, data: TaskUpdate) -> Task:
        task = self.require_task(task_id)
        update_data = data.model_dump(exclude_unset=True)
        if "assigned_to" in update_data:
            self._check_assignee(update_data["assigned_to"])

        for key, value in update_data.items():
            setattr(task, key, value)

        if task.assigned_to and task.status == ServiceStatus.PENDING:
            task.status = ServiceStatus.ASSIGNED
            update_data.setdefault("status", ServiceStatus.ASSIGNED)
        _stamp_status(task, update_data)

        self.db.commit()
        self.db.refresh(task)
        return task

    def delete_task(self, task_id: int) -> None:
        task = self.require_task(task_id)
        self.db.delete(task)
        self.db.commit()


class ServiceRequestService:
    """Guest service request service"""

    def __init__(self, db: Session):
        self.db = db

    def get_requests(self, property_id: Optional[int] = None,
                     status: Optional[ServiceStatus] = None) -> List[ServiceRequest]:
        query = self.db.query(ServiceRequest)
        if property_id:
            query = query.filter(ServiceRequest.property_id == property_id)
        if status:
            query = query.filter(ServiceRequest.status == status)
        return query.order_by(ServiceRequest.created_at.desc(), ServiceRequest.id.desc()).all()

    def require_request(self, request_id: int) -> ServiceRequest:
        request = self.db.query(ServiceRequest).filter(ServiceRequest.id == request_id).first()
        if not request:
            raise NotFoundError("Service request not found")
        return request

    def create_request(self, data: ServiceRequestCreate) -> ServiceRequest:
        request = ServiceRequest(**data.model_dump())
        self.db.add(request)
        self.db.commit()
        self.db.refresh(request)
        logger.info(f"Service request {request.id} created: {request.title}")
        return request

    def update_request(self, request_id: int, data: ServiceRequestUpdate) -> ServiceRequest:
        request = self.require_request(request_id)
        update_data = data.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            setattr(request, key, value)
        _stamp_status(request, update_data)
        self.db.commit()
        self.db.refresh(request)
        return request

    def delete_request(self, request_id: int) -> None:
        request = self.require_request(request_id)
        self.db.delete(request)
        self.db.commit()

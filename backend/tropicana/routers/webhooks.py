"""
PayMongo webhook routes
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from tropicana.database import get_db
from tropicana.models.users import User
from tropicana.models.schemas import WebhookEventResponse
from tropicana.services.exceptions import ServiceError
from tropicana.services.webhook_service import WebhookService
from tropicana.security.auth import require_admin

router = APIRouter(prefix="/webhooks", tags=["Webhooks"])


@router.post("/paymongo")
async def paymongo_webhook(request: Request, db: Session = Depends(get_db)):
    """Receive a PayMongo event"""
    raw_body = await request.body()
    signature = request.headers.get("paymongo-signature")
    try:
        result = WebhookService(db).receive(raw_body, signature)
    except ServiceError as e:
        return JSONResponse(status_code=e.status_code, content={"received": False, "error": e.message})
    if result.get("error"):
        return JSONResponse(status_code=500, content=result)
    return result


@router.get("/events", response_model=List[WebhookEventResponse])
def list_webhook_events(
    resource_id: Optional[str] = None,
    event_type: Optional[str] = None,
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return WebhookService(db).list_events(resource_id, event_type, limit)


@router.post("/retry-failed")
def retry_failed_webhooks(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Re-process failed events that are due"""
    return WebhookService(db).retry_failed_webhooks()


@router.post("/cleanup")
def cleanup_webhook_events(
    days: int = Query(30, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Delete processed events older than ``days``"""
    return {"deleted": WebhookService(db).cleanup_old_events(days)}

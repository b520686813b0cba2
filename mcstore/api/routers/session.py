# mcstore/api/routers/session.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from mcstore.api.deps import get_customer_service, get_notification_service, http_error
from mcstore.data.database import get_db
from mcstore.domain.errors import StoreError
from mcstore.domain.schemas import CustomerUpdateIn, SessionFieldIn, SessionIn, SessionOut
from mcstore.services.customer_service import CustomerService
from mcstore.services.notification_service import NotificationService
from mcstore.services.session_service import SessionService

router = APIRouter(prefix="/session", tags=["session"])


@router.post("/", response_model=SessionOut)
def save_session(payload: SessionIn, db: Session = Depends(get_db)):
    try:
        return SessionService(db).save_session(payload.model_dump())
    except StoreError as e:
        raise http_error(e)


@router.get("/login-email")
def login_email(identifier: str, svc: CustomerService = Depends(get_customer_service)):
    """Email do logowania u dostawcy tozsamosci, telefon jest zamieniany na email."""
    try:
        return {"email": svc.resolve_login_email(identifier)}
    except StoreError as e:
        raise http_error(e)


@router.get("/{uid}", response_model=SessionOut)
def get_session(uid: str, db: Session = Depends(get_db)):
    session = SessionService(db).get_session(uid)
    if not session:
        raise HTTPException(status_code=404, detail="No active session")
    return session


@router.patch("/{uid}", response_model=SessionOut)
def update_session(uid: str, payload: SessionFieldIn, db: Session = Depends(get_db)):
    try:
        return SessionService(db).update_session(uid, payload.field, payload.value)
    except StoreError as e:
        raise http_error(e)


@router.delete("/{uid}")
def clear_session(uid: str, db: Session = Depends(get_db)):
    return {"ok": SessionService(db).clear_session(uid)}


@router.get("/{uid}/profile")
def get_profile(uid: str, svc: CustomerService = Depends(get_customer_service)):
    profile = svc.get_customer_profile(uid)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.patch("/{uid}/profile")
def update_profile(uid: str, payload: CustomerUpdateIn, svc: CustomerService = Depends(get_customer_service)):
    try:
        svc.update_customer_profile(uid, payload.updates)
    except StoreError as e:
        raise http_error(e)
    return {"ok": True}


@router.get("/{uid}/notifications")
def notifications(uid: str, svc: NotificationService = Depends(get_notification_service)):
    return {"items": svc.get_notifications(uid), "unread": svc.get_unread_count(uid)}


@router.post("/notifications/{notif_id}/read")
def mark_read(notif_id: str, svc: NotificationService = Depends(get_notification_service)):
    return {"ok": svc.mark_read(notif_id)}

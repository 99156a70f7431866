from __future__ import annotations

import hmac
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from lockerlink.infrastructure.database import SessionLocal
from lockerlink.services.lockerlink_service import (
    assignment_update_service,
    check_connection_service,
    delete_webhooks_service,
    get_pickup_info_service,
    get_settings_service,
    register_webhooks_service,
    save_settings_service,
)
from lockerlink.schemas.models import (
    CallbackResponse,
    ConnectionTestRequest,
    ConnectionTestResult,
    PickupInfo,
    SettingsIn,
    SettingsOut,
    WebhookRegistration,
)
from lockerlink.core.use_cases.apply_assignment_update import MissingFieldsError, OrderNotFoundError
from lockerlink.core.use_cases.get_pickup_info import NotFoundError as PickupOrderNotFoundError
from lockerlink.core.use_cases.verify_signature import (
    SIGNATURE_HEADER,
    InvalidSignatureError,
    MissingSignatureError,
    NotConfiguredError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_db() -> Session:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def require_admin(x_admin_token: str | None = Header(default=None)) -> None:
    from lockerlink.infrastructure.config import settings

    if not settings.admin_token:
        return
    if not x_admin_token or not hmac.compare_digest(x_admin_token.encode(), settings.admin_token.encode()):
        raise HTTPException(status_code=401, detail="Invalid admin token")


def _callback_response(status_code: int, *, success: bool, message: str, code: str | None = None) -> JSONResponse:
    body = CallbackResponse(success=success, message=message, code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@router.post("/assignment-update", response_model=CallbackResponse)
async def post_assignment_update(
        request: Request,
        background_tasks: BackgroundTasks,
        db: Session = Depends(get_db),
) -> JSONResponse:
    """
    Receive an assignment update from LockerLink

    Returns:
      - 200 when applied
      - 400 missing_fields, 404 order_not_found
      - 401 missing_signature / invalid_signature
      - 500 not_configured or a storage failure
    """
    # Signature is checked over these exact bytes
    body = await request.body()
    signature = request.headers.get(SIGNATURE_HEADER)

    try:
        await run_in_threadpool(assignment_update_service, body, signature, db, background_tasks)
    except (MissingSignatureError, InvalidSignatureError) as e:
        return _callback_response(401, success=False, message=str(e), code=e.code)
    except NotConfiguredError as e:
        return _callback_response(500, success=False, message=str(e), code=e.code)
    except MissingFieldsError as e:
        return _callback_response(400, success=False, message=str(e), code=e.code)
    except OrderNotFoundError as e:
        return _callback_response(404, success=False, message=str(e), code=e.code)
    except SQLAlchemyError:
        logger.exception("Storage failure while applying LockerLink assignment update")
        return _callback_response(500, success=False, message="Internal error.", code="internal_error")

    return _callback_response(200, success=True, message="Assignment update received.")


@router.get("/settings", response_model=SettingsOut, dependencies=[Depends(require_admin)])
def get_settings(db: Session = Depends(get_db)) -> SettingsOut:
    """
    Get integration settings (the api key is never returned)
    """
    return get_settings_service(db)


@router.put("/settings", response_model=SettingsOut, dependencies=[Depends(require_admin)])
def put_settings(body: SettingsIn, db: Session = Depends(get_db)) -> SettingsOut:
    """
    Save integration settings; re-registers webhooks when the url or key changes
    """
    return save_settings_service(body, db)


@router.post("/settings/test-connection", response_model=ConnectionTestResult, dependencies=[Depends(require_admin)])
def post_settings_test_connection(body: ConnectionTestRequest, db: Session = Depends(get_db)) -> ConnectionTestResult:
    """
    Ping the LockerLink webhook url
    """
    return check_connection_service(body.webhook_url, db)


@router.post("/webhooks", response_model=WebhookRegistration, dependencies=[Depends(require_admin)])
def post_webhooks(db: Session = Depends(get_db)) -> WebhookRegistration:
    """
    Register the order.created / order.updated webhooks
    """
    return WebhookRegistration(webhook_ids=register_webhooks_service(db))


@router.delete("/webhooks", response_model=WebhookRegistration, dependencies=[Depends(require_admin)])
def delete_webhooks(db: Session = Depends(get_db)) -> WebhookRegistration:
    """
    Remove every LockerLink webhook
    """
    delete_webhooks_service(db)
    return WebhookRegistration(webhook_ids=[])


@router.get("/orders/{order_id}/pickup", response_model=PickupInfo, dependencies=[Depends(require_admin)])
def get_orders_order_id_pickup(order_id: int, db: Session = Depends(get_db)) -> PickupInfo:
    """
    Get locker pickup details for an order
    """
    try:
        return get_pickup_info_service(order_id, db)
    except PickupOrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

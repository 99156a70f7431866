from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy.orm import Session
from starlette.background import BackgroundTasks

from lockerlink.core.entities.credentials import IntegrationCredentials
from lockerlink.core.use_cases.apply_assignment_update import ApplyAssignmentUpdateUseCase
from lockerlink.core.use_cases.check_connection import CheckConnectionUseCase
from lockerlink.core.use_cases.get_pickup_info import GetPickupInfoUseCase
from lockerlink.core.use_cases.get_settings import GetSettingsUseCase, load_credentials
from lockerlink.core.use_cases.register_webhooks import WebhookRegistrar
from lockerlink.core.use_cases.save_settings import SaveSettingsUseCase
from lockerlink.core.use_cases.verify_signature import VerifySignatureUseCase
from lockerlink.infrastructure.notifications.email import BackgroundEmailNotificationSink, SmtpMailer
from lockerlink.infrastructure.repositories.option_repository_impl import OptionRepositoryImpl
from lockerlink.infrastructure.repositories.order_repository_impl import OrderRepositoryImpl
from lockerlink.infrastructure.repositories.webhook_repository_impl import WebhookRepositoryImpl
from lockerlink.infrastructure.webhook_pinger import HttpxWebhookPinger
from lockerlink.schemas.models import ConnectionTestResult, PickupInfo, SettingsIn, SettingsOut

logger = logging.getLogger(__name__)


def _settings():
    from lockerlink.infrastructure.config import settings
    return settings


def _build_registrar(credentials: IntegrationCredentials, db: Session) -> WebhookRegistrar:
    return WebhookRegistrar(
        credentials=credentials,
        webhook_repo=WebhookRepositoryImpl(db),
        option_repo=OptionRepositoryImpl(db),
        order_repo=OrderRepositoryImpl(db),
    )


def _decode_json(body: bytes) -> Any:
    """Callback bodies that are not valid JSON are handled as an empty payload."""
    try:
        return json.loads(body)
    except (UnicodeDecodeError, ValueError):
        return {}


def assignment_update_service(
        body: bytes,
        signature: str | None,
        db: Session,
        background_tasks: BackgroundTasks,
) -> dict[str, Any]:
    """
    Verify the raw callback body, then decode and apply it.

    Raises the verify_signature / apply_assignment_update errors for the router to map.
    """
    option_repo = OptionRepositoryImpl(db)
    credentials = load_credentials(option_repo)

    VerifySignatureUseCase(credentials=credentials).execute(body=body, signature=signature)

    order_repo = OrderRepositoryImpl(db)
    sink = BackgroundEmailNotificationSink(
        background_tasks=background_tasks,
        mailer=SmtpMailer(_settings()),
    )
    use_case = ApplyAssignmentUpdateUseCase(order_repo=order_repo, notification_sink=sink)

    result = use_case.execute(_decode_json(body))
    return {"order_id": result.order_id, "status": result.status, "notified": result.notified}


def should_deliver_service(default: bool, webhook_id: int, order_id: Any, db: Session) -> bool:
    """
    Delivery filter hook for the order-event bus.

    The bus calls this before sending an order event to a subscription, passing
    its own decision as `default`; the return value replaces that decision.
    """
    credentials = load_credentials(OptionRepositoryImpl(db))
    return _build_registrar(credentials, db).should_deliver(default, webhook_id, order_id)


def register_webhooks_service(db: Session) -> list[int]:
    credentials = load_credentials(OptionRepositoryImpl(db))
    return _build_registrar(credentials, db).create()


def delete_webhooks_service(db: Session) -> None:
    credentials = load_credentials(OptionRepositoryImpl(db))
    _build_registrar(credentials, db).delete()


def ensure_webhooks_service(db: Session) -> list[int]:
    """
    Register subscriptions on startup when credentials exist but none are recorded
    """
    credentials = load_credentials(OptionRepositoryImpl(db))
    registrar = _build_registrar(credentials, db)
    if not credentials.configured or registrar.owned_ids():
        return registrar.owned_ids()
    return registrar.create()


def get_settings_service(db: Session) -> SettingsOut:
    dto = GetSettingsUseCase(option_repo=OptionRepositoryImpl(db)).execute()
    return SettingsOut(
        webhook_url=dto.webhook_url,
        enabled=dto.enabled,
        configured=dto.configured,
        active=dto.active,
    )


def save_settings_service(body: SettingsIn, db: Session) -> SettingsOut:
    use_case = SaveSettingsUseCase(
        option_repo=OptionRepositoryImpl(db),
        registrar_factory=lambda credentials: _build_registrar(credentials, db),
    )

    dto = use_case.execute(webhook_url=body.webhook_url, api_key=body.api_key, enabled=body.enabled)
    return SettingsOut(
        webhook_url=dto.webhook_url,
        enabled=dto.enabled,
        configured=dto.configured,
        active=dto.active,
    )


def check_connection_service(webhook_url: str | None, db: Session) -> ConnectionTestResult:
    if webhook_url is None:
        webhook_url = load_credentials(OptionRepositoryImpl(db)).webhook_url

    pinger = HttpxWebhookPinger(timeout=_settings().connection_test_timeout)
    result = CheckConnectionUseCase(pinger=pinger).execute(webhook_url=webhook_url)
    return ConnectionTestResult(success=result.success, message=result.message)


def get_pickup_info_service(order_id: int, db: Session) -> PickupInfo:
    dto = GetPickupInfoUseCase(order_repo=OrderRepositoryImpl(db)).execute(order_id=order_id)

    return PickupInfo(
        order_id=dto.order_id,
        status=dto.status,
        status_label=dto.status_label,
        locker_name=dto.locker_name,
        compartment_label=dto.compartment_label,
        pickup_url=dto.pickup_url,
        is_locker_order=dto.is_locker_order,
        awaiting_assignment=dto.awaiting_assignment,
        show_customer_details=dto.show_customer_details,
    )

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel


class AssignmentUpdate(BaseModel):
    """Documents the callback wire schema; the route verifies and decodes the raw body itself."""
    orderId: int
    status: str
    compartmentLabel: Optional[str] = None
    lockerName: Optional[str] = None
    pickupUrl: Optional[str] = None
    unlockToken: Optional[str] = None


class CallbackResponse(BaseModel):
    success: bool
    message: str
    code: Optional[str] = None


class SettingsIn(BaseModel):
    webhook_url: str = ""
    api_key: str = ""
    enabled: bool = True


class SettingsOut(BaseModel):
    webhook_url: str
    enabled: bool
    configured: bool
    active: bool


class ConnectionTestRequest(BaseModel):
    webhook_url: Optional[str] = None


class ConnectionTestResult(BaseModel):
    success: bool
    message: str = ""


class WebhookRegistration(BaseModel):
    webhook_ids: List[int]


class PickupInfo(BaseModel):
    order_id: int
    status: str
    status_label: str
    locker_name: str
    compartment_label: str
    pickup_url: str
    is_locker_order: bool
    awaiting_assignment: bool
    show_customer_details: bool

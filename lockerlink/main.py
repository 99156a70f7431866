import logging

import yaml
from fastapi import FastAPI
from lockerlink.infrastructure.config import settings
from lockerlink.infrastructure.database import Base, engine, SessionLocal
from lockerlink.presentation.routers import router
from lockerlink.services.lockerlink_service import ensure_webhooks_service

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI()


# Use the contractual schema
def custom_openapi():
    with open(settings.openapi_path) as f:
        return yaml.safe_load(f)


@app.on_event("startup")
def _register_webhooks_on_startup() -> None:
    """
    Create the LockerLink webhooks if credentials are stored but no subscriptions are recorded yet
    """
    db = SessionLocal()
    try:
        ensure_webhooks_service(db)
    finally:
        db.close()


app.openapi = custom_openapi
Base.metadata.create_all(bind=engine)
app.include_router(router)

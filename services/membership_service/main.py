from fastapi import FastAPI

from shared.error_handlers import register_exception_handlers
from shared.observability import setup_observability

from .router import router, public_router

membership_app = FastAPI(title="Membership Service", version="1.0.0")

setup_observability(membership_app, "membership_service")
register_exception_handlers(membership_app)

membership_app.include_router(public_router)
membership_app.include_router(router)

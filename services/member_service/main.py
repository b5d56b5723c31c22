from fastapi import FastAPI

from shared.error_handlers import register_exception_handlers
from shared.observability import setup_observability

from services.auth_service.models import Member  # noqa: F401 - registers model with SQLAlchemy Base
from .router import router, public_router

member_app = FastAPI(title="Member Directory Service", version="1.0.0")

setup_observability(member_app, "member_service")
register_exception_handlers(member_app)

member_app.include_router(public_router)
member_app.include_router(router)

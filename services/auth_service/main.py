from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from shared.config.database import AsyncSessionLocal
from shared.error_handlers import register_exception_handlers
from shared.observability import setup_observability
from shared.security import limiter

from .models import Account  # noqa: F401 - registers model with SQLAlchemy Base
from .router import router, public_router
from .service import AuthService

auth_app = FastAPI(
    title="Auth Service",
    version="1.0.0",
    description="JWT authentication: login, profile, password change.",
)

setup_observability(auth_app, "auth_service")
register_exception_handlers(auth_app)

auth_app.state.limiter = limiter
auth_app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

auth_app.include_router(router)
auth_app.include_router(public_router)


async def bootstrap_admin() -> None:
    async with AsyncSessionLocal() as db:
        await AuthService(db).ensure_bootstrap_admin()

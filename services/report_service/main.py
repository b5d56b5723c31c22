from fastapi import FastAPI

from shared.error_handlers import register_exception_handlers
from shared.observability import setup_observability

from .router import router, public_router

report_app = FastAPI(title="Report Service", version="1.0.0")

setup_observability(report_app, "report_service")
register_exception_handlers(report_app)

report_app.include_router(public_router)
report_app.include_router(router)

import os

from fastapi import FastAPI, status

from shared.config.database import create_tables
from shared.error_handlers import register_exception_handlers
from shared.observability import configure_logging

from services.auth_service.main import auth_app, bootstrap_admin
from services.member_service.main import member_app
from services.member_service.router import create_member, list_members
from services.member_service.schemas import MemberCreatedResponse, MemberResponse
from services.membership_service.main import membership_app
from services.payment_service.main import payment_app
from services.report_service.main import report_app

configure_logging()

app = FastAPI(title="Gym Membership Cluster")
register_exception_handlers(app)


@app.on_event("startup")
async def startup_event():
    # Mounted apps do not receive startup events, so the cluster does their setup
    await create_tables()
    await bootstrap_admin()


@app.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "cluster", "status": "running"}


# A mount only matches paths below its prefix; serve the bare collection path here
app.add_api_route(
    "/members",
    list_members,
    methods=["GET"],
    response_model=list[MemberResponse],
    include_in_schema=False,
)
app.add_api_route(
    "/members",
    create_member,
    methods=["POST"],
    response_model=MemberCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)

app.mount("/auth", auth_app)
app.mount("/members", member_app)
app.mount("/membership", membership_app)
app.mount("/payments", payment_app)
app.mount("/reports", report_app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", "5000")))

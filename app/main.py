import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlmodel import Session

from app.config import settings
from app.database import create_db_and_tables, engine
from app.exceptions import StorefrontError
from app.services.catalog_service import seed_services
from app.routes import (
    admin_analytics,
    admin_inquiries,
    admin_notifications,
    admin_orders,
    admin_projects,
    auth,
    checkout,
    dashboard,
    health,
    inquiries,
    orders,
    payments,
    projects,
    services,
    services_admin,
    support,
    users,
)

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.ENV == "local":
        create_db_and_tables()
        with Session(engine) as session:
            seed_services(session)
    yield

app = FastAPI(title="Agency Storefront API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(users.router, prefix="/users", tags=["Users"])
app.include_router(services.router, prefix="/services", tags=["Services"])
app.include_router(services_admin.router, prefix="/admin/services", tags=["Admin Services"])
app.include_router(checkout.router, prefix="/checkout", tags=["Checkout"])
app.include_router(orders.router, prefix="/orders", tags=["Orders"])
app.include_router(payments.router, prefix="/payments", tags=["Payments"])
app.include_router(admin_orders.router, prefix="/admin/orders", tags=["Admin Orders"])
app.include_router(projects.router, prefix="/projects", tags=["Projects"])
app.include_router(admin_projects.router, prefix="/admin/projects", tags=["Admin Projects"])
app.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
app.include_router(admin_analytics.router, prefix="/admin/analytics", tags=["Admin Analytics"])
app.include_router(admin_notifications.router, prefix="/admin/notifications", tags=["Admin Notifications"])
app.include_router(inquiries.router, prefix="/inquiries", tags=["Inquiries"])
app.include_router(support.router, prefix="/support-requests", tags=["Support"])
app.include_router(admin_inquiries.router, prefix="/admin/inquiries", tags=["Admin Inquiries"])
app.include_router(health.router, prefix="/health", tags=["Health"])


@app.get("/")
def root():
    return {
        "auth_endpoints": ["/auth/register", "/auth/login"],
        "user_endpoints": ["/users/me"],
        "catalog": ["/services", "/services/{service_id}", "/services/{service_id}/quote"],
        "checkout": [
            "/checkout/sessions", "/checkout/sessions/{token}", "/checkout/resume"
        ],
        "orders": [
            "/orders", "/orders/{order_id}", "/orders/{order_id}/payment-status",
            "/orders/{order_id}/reactivate-payment", "/orders/{order_id}/events"
        ],
        "payments": ["/payments/webhook", "/payments/callback"],
        "projects": ["/projects", "/projects/{project_id}"],
        "dashboard": ["/dashboard/stats"],
        "inquiries": ["/inquiries/quote-request", "/inquiries/contact"],
        "support": ["/support-requests", "/support-requests/{support_id}"],
    }

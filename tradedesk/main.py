# Main application file



import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

import tradedesk.models  # noqa: F401  registers every table on Base
from tradedesk.database import engine, Base
from tradedesk.core.rate_limiter import limiter
from tradedesk.core.config import settings
from tradedesk.routers import (
    customers,
    pricing,
    products,
    sales,
    users,
    dashboard,
    analytics,
    exports,
)


# LOGGING CONFIGURATION

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(message)s",
)

logger = logging.getLogger("app")


# DATABASE

Base.metadata.create_all(bind=engine)


# APP INIT

app = FastAPI(
    title="Trade Desk API",
    description="Customers, per-kilo pricing, sales and analytics for a trading business",
    version="1.0.0",
    debug=settings.DEBUG,
)



# CORS

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type"],
)


# RATE LIMITING

app.state.limiter = limiter
app.add_exception_handler(
    RateLimitExceeded,
    _rate_limit_exceeded_handler
)


# REQUEST LOGGING MIDDLEWARE

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    duration = round((time.time() - start_time) * 1000, 2)

    logger.info(
        f"{request.method} {request.url.path} "
        f"Status: {response.status_code} "
        f"Time: {duration}ms"
    )

    return response


# ROUTERS

app.include_router(customers.router)
app.include_router(pricing.router)
app.include_router(products.router)
app.include_router(sales.router)
app.include_router(users.router)
app.include_router(dashboard.router)
app.include_router(analytics.router)
app.include_router(exports.router)



# ROOT

@app.get("/")
def root():
    logger.info("Health check endpoint called")
    return {"message": "Trade Desk API is running"}

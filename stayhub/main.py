# stayhub/main.py

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stayhub.config import ALLOWED_ORIGINS, SEED_DEMO_DATA
from stayhub.errors import StayHubError
from stayhub.logging_config import setup_logging
from stayhub.middleware import RequestIDMiddleware
from stayhub.routes._runner import stayhub_error_handler
from stayhub.routes.bookings import router as bookings_router
from stayhub.routes.businesses import router as businesses_router
from stayhub.routes.health import router as health_router
from stayhub.routes.ledger import router as ledger_router
from stayhub.routes.marketing import router as marketing_router
from stayhub.routes.metrics import router as metrics_router
from stayhub.routes.units import router as units_router

# Initialize structured logging
setup_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="StayHub Reservation Engine",
    description="Multi-tenant booking lifecycle, pricing and settlement API",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS if "*" not in ALLOWED_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)

app.add_exception_handler(StayHubError, stayhub_error_handler)  # type: ignore[arg-type]

# Register routers
app.include_router(health_router, tags=["Health"])
app.include_router(metrics_router, tags=["Metrics"])
app.include_router(bookings_router, tags=["Bookings"])
app.include_router(units_router, tags=["Units"])
app.include_router(businesses_router, tags=["Businesses"])
app.include_router(ledger_router, tags=["Ledger"])
app.include_router(marketing_router, tags=["Marketing"])


@app.on_event("startup")
def startup_event() -> None:
    """Create the schema and, when configured, load the demo dataset."""
    from stayhub.db.engine import SessionLocal, engine
    from stayhub.db.schema import init_db
    from stayhub.seed import seed_demo_data

    logger.info("application_starting")

    init_db(engine)
    if SEED_DEMO_DATA:
        with SessionLocal() as session:
            seed_demo_data(session)

    logger.info("application_started", seed_demo_data=SEED_DEMO_DATA)

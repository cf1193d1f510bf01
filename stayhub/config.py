import os
from decimal import Decimal

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG = LOG_LEVEL == "DEBUG"

# In-process SQLite stands in for the marketplace dataset unless a real store is configured
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+pysqlite:///:memory:")
if not DATABASE_URL:
    raise ValueError("DATABASE_URL must not be empty")

ALLOWED_ORIGINS_RAW = os.getenv("ALLOWED_ORIGINS", "*")

ALLOWED_ORIGINS: list[str] = [
    origin.strip() for origin in ALLOWED_ORIGINS_RAW.split(",")
]

DEFAULT_SERVICE_FEE = Decimal(os.getenv("DEFAULT_SERVICE_FEE", "25000"))

WALKIN_GUEST_ID = os.getenv("WALKIN_GUEST_ID", "u-walkin")

REQUIRE_PAYMENT_FOR_CHECKIN = os.getenv("REQUIRE_PAYMENT_FOR_CHECKIN", "true").lower() == "true"

SERVICE_TIMEOUT_SECONDS = float(os.getenv("SERVICE_TIMEOUT_SECONDS", "10"))

SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "false").lower() == "true"

FEATURED_LISTING_PRICE = Decimal(os.getenv("FEATURED_LISTING_PRICE", "250000"))

PENALTY_ALERT_THRESHOLD = int(os.getenv("PENALTY_ALERT_THRESHOLD", "5"))

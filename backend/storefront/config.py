# storefront/config.py
import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./storefront.db")

REDIS_URL = os.environ.get("REDIS_URL", "redis://localhost:6379/0")
BROKER_URL = os.environ.get("BROKER_URL", "redis://localhost:6379/1")
RESULT_BACKEND = os.environ.get("RESULT_BACKEND", "redis://localhost:6379/2")

# Unset means payments are disabled (503 on checkout).
STRIPE_SECRET_KEY = os.environ.get("STRIPE_SECRET_KEY") or None
PAYMENT_CURRENCY = os.environ.get("PAYMENT_CURRENCY", "usd")

CORS_ORIGINS = [
    o.strip()
    for o in os.environ.get("FRONTEND_URL", "http://localhost:5173").split(",")
    if o.strip()
]

HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "5000"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 1000

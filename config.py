"""Application configuration read from the environment"""
import os
from dotenv import load_dotenv

load_dotenv() # Searches for .env in current dir and parents

MONGODB_URI = os.getenv("MONGODB_URI")
DB_NAME = os.getenv("DB_NAME", "expense_db")
EXPENSES_COLLECTION = os.getenv("EXPENSES_COLLECTION", "expenses")

# "mongo" for a MongoDB-backed store, "memory" for a process-local one
EXPENSE_STORE = os.getenv("EXPENSE_STORE", "mongo").lower()

# Header carrying the identity asserted by the authenticating gateway
AUTH_HEADER = os.getenv("AUTH_HEADER", "X-User-Id")

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
DEFAULT_RATE_LIMIT = os.getenv("DEFAULT_RATE_LIMIT", "60/minute")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

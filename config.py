import os
from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()

def get_env_var(name: str) -> str:
    """Get environment variable or raise a clear error if missing."""
    value = os.getenv(name)
    if not value:
        raise RuntimeError(
            f"❌ Missing required environment variable: {name}\n"
            f"👉 Did you copy .env.example to .env and fill in your keys?"
        )
    return value

# Required at startup (checked by the API layer, not at import time)
REQUIRED_VARS = ("GOOGLE_API_KEY", "TELEGRAM_BOT_TOKEN", "API_KEY", "DATABASE_URL")

GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY", "")
GEMINI_MODEL_NAME = os.getenv("GEMINI_MODEL_NAME", "gemini-2.0-flash")

TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")

# Shared key for service-to-service calls to /expenses
API_KEY = os.getenv("API_KEY", "")

# Public URL of the web app, used in account-linking replies
APP_URL = os.getenv("APP_URL", "http://localhost:3000").rstrip("/")

DATABASE_URL = os.getenv("DATABASE_URL", "")

# Optional vars (with defaults)
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
PORT = int(os.getenv("PORT", "8000"))
LINK_TOKEN_TTL_MINUTES = int(os.getenv("LINK_TOKEN_TTL_MINUTES", "15"))

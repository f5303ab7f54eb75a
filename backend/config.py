import os
import logging
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")
IS_PRODUCTION = ENVIRONMENT == "production"

# Database
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./brd_analyzer.db")

# Signs the short-lived OAuth state/verifier cookies
SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-change-me")

# Origin of the web app; OAuth redirect URIs and browser redirects hang off it
APP_BASE_URL = os.environ.get("APP_BASE_URL", "http://localhost:3000").rstrip("/")

CORS_ORIGINS = [o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()]

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Mock mode (for testing without API key)
MOCK_MODE = os.environ.get("MOCK_MODE", "false").lower() == "true"

# LLM (any OpenAI-compatible chat completion endpoint; Groq by default)
LLM_BASE_URL = os.environ.get("LLM_BASE_URL", "https://api.groq.com/openai/v1")
LLM_MODEL = os.environ.get("LLM_MODEL", "llama-3.1-8b-instant")
LLM_TEMPERATURE = 0.3
LLM_TIMEOUT_SECONDS = float(os.environ.get("LLM_TIMEOUT_SECONDS", "120"))
LLM_MAX_DOCUMENT_CHARS = int(os.environ.get("LLM_MAX_DOCUMENT_CHARS", "60000"))

# Auth
AUTH_COOKIE_NAME = "auth_token"
SESSION_DURATION_HOURS = 4
PASSWORD_MIN_LENGTH = 6
OAUTH_COOKIE_MAX_AGE = 600  # 10 minutes
OAUTH_HTTP_TIMEOUT_SECONDS = 10.0

# Uploads
MAX_UPLOAD_BYTES = 10 * 1024 * 1024

# Plan defaults for new accounts
DEFAULT_PLAN = "FREE"
DEFAULT_AI_CALLS_LIMIT = 5


def get_api_key():
    for name in ("LLM_API_KEY", "GROQ_API_KEY", "OPENAI_API_KEY"):
        key = os.environ.get(name)
        if key:
            return key.strip()
    env_path = Path(__file__).parent / ".env"
    if env_path.exists():
        with open(env_path) as f:
            for line in f:
                name, _, value = line.partition("=")
                if name.strip() in ("LLM_API_KEY", "GROQ_API_KEY", "OPENAI_API_KEY") and value.strip():
                    return value.strip()
    home_config = Path.home() / ".openai" / "api_key"
    if home_config.exists():
        return home_config.read_text().strip()
    return None


def get_oauth_credentials(provider: str):
    """Return (client_id, client_secret) for a provider, either may be None"""
    prefix = provider.upper()
    return (
        os.environ.get(f"{prefix}_CLIENT_ID"),
        os.environ.get(f"{prefix}_CLIENT_SECRET"),
    )


def configure_logging():
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

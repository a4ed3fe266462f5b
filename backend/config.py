import dotenv
import os

dotenv.load_dotenv()

PORT = int(os.getenv("PORT", "8000"))
HOST = os.getenv("HOST", "0.0.0.0")

if not PORT:
    raise ValueError("PORT is not set")

OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY")
OPENROUTER_BASE_URL = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
OPENROUTER_MODEL = os.getenv("OPENROUTER_MODEL", "anthropic/claude-sonnet-4.5")
MAX_TOKENS = int(os.getenv("MAX_TOKENS", "8192"))

if not OPENROUTER_API_KEY:
    print("Warning: OPENROUTER_API_KEY is not set. AI chat will not work.")

DEFAULT_PROJECT_ID = os.getenv("DEFAULT_PROJECT_ID", "default")
CORS_ORIGINS = [
    origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
]

DEBUG_MODE = os.getenv("DEBUG_MODE", "true").lower() in ("1", "true", "yes")

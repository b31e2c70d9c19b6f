import logging
import os
from typing import Optional
from dotenv import load_dotenv

# Load .env - try multiple paths
load_dotenv()  # Current directory
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), ".env"))

logger = logging.getLogger(__name__)

# Upstream chat-completion gateway (OpenAI-compatible)
API_KEY_ENV: str = "FLOWCHART_API_KEY"
API_BASE_URL: str = os.getenv("FLOWCHART_API_BASE_URL", "https://ai.gateway.lovable.dev/v1")
MODEL_VISION: str = os.getenv("FLOWCHART_MODEL_VISION", "google/gemini-2.5-flash")
TEMPERATURE: float = float(os.getenv("FLOWCHART_TEMPERATURE", "0.7"))
UPSTREAM_TIMEOUT: float = float(os.getenv("FLOWCHART_UPSTREAM_TIMEOUT", "60"))

# Client side
GATEWAY_URL: str = os.getenv("FLOWCHART_GATEWAY_URL", "http://localhost:8000/api/analyze-flowchart")
CLIENT_TIMEOUT: float = float(os.getenv("FLOWCHART_CLIENT_TIMEOUT", "90"))

LOG_LEVEL: str = os.getenv("FLOWCHART_LOG_LEVEL", "INFO")

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png")

FALLBACK_TERM: str = "Flowchart Analysis"

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]

SYSTEM_PROMPT: str = (
    "You are an expert at analyzing flowcharts and diagrams. Analyze the flowchart image and "
    "identify every term, concept, and relationship. For each element, provide a clear, simple "
    "explanation suitable for learning. Structure your response as a JSON array of objects with "
    "\"term\" and \"explanation\" fields. Be thorough and explain all visible concepts."
)

USER_INSTRUCTION: str = (
    "Please analyze this flowchart and explain every term and concept in simple language. "
    "Include all visible text, relationships, and key ideas."
)


def get_api_key() -> Optional[str]:
    """Return the upstream credential, read from the environment on every call."""
    return os.getenv(API_KEY_ENV) or None


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    log_key_status()


def log_key_status() -> None:
    if get_api_key():
        logger.info("[CONFIG] %s loaded", API_KEY_ENV)
    else:
        logger.warning("[CONFIG] %s not found! Analysis requests will fail until it is set.", API_KEY_ENV)


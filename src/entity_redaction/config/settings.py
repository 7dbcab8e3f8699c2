"""
Environment settings loaded from .env file.
"""
import os
from dotenv import load_dotenv

load_dotenv()


# --- Remote services ---
ANALYZER_URL: str = os.getenv("ANALYZER_URL", "http://localhost:5002")
ANONYMIZER_URL: str = os.getenv("ANONYMIZER_URL", "http://localhost:5001")

# --- Policy defaults ---
DEFAULT_ACCEPTANCE_THRESHOLD: float = float(os.getenv("DEFAULT_ACCEPTANCE_THRESHOLD", "0.5"))
DEFAULT_LANGUAGE: str = os.getenv("DEFAULT_LANGUAGE", "en")
DEFAULT_NER_MODEL: str = os.getenv("DEFAULT_NER_MODEL", "en_core_web_lg")

# --- Observability ---
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
METRICS_ENABLED: bool = os.getenv("METRICS_ENABLED", "true").lower() == "true"

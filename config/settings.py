import logging
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from config/.env
BASE_DIR = Path(__file__).resolve().parent
load_dotenv(BASE_DIR / ".env")

class Settings:
    GEMINI_API_URL: str = os.getenv(
        "GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta"
    )
    GEMINI_API_KEY: str | None = os.getenv("GEMINI_API_KEY")

    IMAGEN_MODEL: str = os.getenv("IMAGEN_MODEL", "imagen-4.0-generate-001")
    OUTPUT_MIME_TYPE: str = os.getenv("OUTPUT_MIME_TYPE", "image/jpeg")

    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "120"))  # seconds

    BACKEND_URL: str = os.getenv("BACKEND_URL", "http://127.0.0.1:8000")
    BACKEND_HOST: str = os.getenv("BACKEND_HOST", "127.0.0.1")
    BACKEND_PORT: int = int(os.getenv("BACKEND_PORT", "8000"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()


def setup_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()

ANALYSIS_PROMPT = (
    "Analyze this drawing and explain what you see. "
    "If it contains mathematical content, help solve or explain it."
)


class Settings(BaseModel):
    analyze_url: str = "http://localhost:3000/api/analyze-canvas"
    equations_url: str = "http://localhost:3000/api/extract-equation"
    graph_url: str = "http://localhost:3000/api/convert-to-geogebra"
    transfer_timeout: float = 30.0
    jpeg_quality: int = 80  # fixed for every snapshot
    notification_ttl: float = 3.0
    transfer_history: int = 100  # settled transfer records kept for polling
    background: str = "#ffffff"
    default_color: str = "#ef4444"
    default_width: float = 3.0
    log_level: str = "INFO"


def load_settings() -> Settings:
    """
    Build settings from STUDIUM_* environment variables (and .env).
    Unset variables fall back to the model defaults.
    """
    env = {
        "analyze_url": os.getenv("STUDIUM_ANALYZE_URL"),
        "equations_url": os.getenv("STUDIUM_EQUATIONS_URL"),
        "graph_url": os.getenv("STUDIUM_GRAPH_URL"),
        "transfer_timeout": os.getenv("STUDIUM_TRANSFER_TIMEOUT"),
        "jpeg_quality": os.getenv("STUDIUM_JPEG_QUALITY"),
        "notification_ttl": os.getenv("STUDIUM_NOTIFICATION_TTL"),
        "transfer_history": os.getenv("STUDIUM_TRANSFER_HISTORY"),
        "background": os.getenv("STUDIUM_BACKGROUND"),
        "log_level": os.getenv("STUDIUM_LOG_LEVEL"),
    }
    return Settings(**{k: v for k, v in env.items() if v is not None})

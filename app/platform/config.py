from pathlib import Path
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── App ─────────────────────────────────────
    APP_NAME: str = "Accessibility Scan Service"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # ── Logging ─────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # ── CORS ────────────────────────────────────
    CORS_ORIGINS: List[str] = ["*"]

    # ── Accessibility engine ────────────────────
    AXE_SCRIPT_URL: str = "https://cdnjs.cloudflare.com/ajax/libs/axe-core/4.8.2/axe.min.js"
    AXE_RUN_ONLY_TAGS: List[str] = []  # empty runs every rule
    SWALLOW_ENGINE_ERRORS: bool = False

    # ── Timeouts (seconds) ──────────────────────
    SESSION_TIMEOUT: float = 60.0
    ENGINE_LOAD_TIMEOUT: float = 15.0
    ENGINE_POLL_INTERVAL: float = 0.2
    ANALYSIS_TIMEOUT: float = 30.0
    POLL_BACKOFF: float = 1.0  # 1.0 keeps the interval fixed

    # ── Browser ─────────────────────────────────
    MAX_CONCURRENT_SESSIONS: int = 4
    CHROMEDRIVER_PATH: Optional[str] = None
    CHROME_BINARY: Optional[str] = None
    CHROME_ARGUMENTS: List[str] = [
        "--headless=new",
        "--disable-gpu",
        "--disable-dev-shm-usage",
        "--disable-extensions",
        "--no-sandbox",
        "--disable-web-security",
        "--disable-features=VizDisplayCompositor",
    ]

    class Config:
        env_file = str(Path(__file__).parent.parent.parent / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


settings = Settings()

# articlegen/config.py
from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_SCHEMA_DIR = PACKAGE_DIR / "schema"

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s %(message)s"


def _env_str(name: str, default: str = "") -> str:
    raw = os.getenv(name)
    return default if raw in (None, "") else raw.strip()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Process-wide configuration. Built once at startup and handed to each component."""

    model_config = ConfigDict(protected_namespaces=())

    openai_api_key: str = ""
    openai_base_url: Optional[str] = None
    model_article: str = "gpt-5-mini"
    model_util: Optional[str] = None
    model_fallback: Optional[str] = "gpt-4o-mini"
    timeout: float = 120.0
    connect_timeout: float = 10.0
    app_debug: bool = False

    cache_dir: Path = Path("storage/cache")
    log_dir: Path = Path("storage/logs")
    schema_dir: Path = DEFAULT_SCHEMA_DIR

    site_topic: str = "camel milk"
    min_sentences: int = 4
    max_inline_citations: int = 3
    idea_pool_cap: int = 2000
    seed_max_iterations: int = 50
    reference_limit: int = 12
    store_lock_timeout: float = 10.0

    @property
    def utility_model(self) -> str:
        return self.model_util or self.model_article

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        """Load .env (if present) and read every knob from the environment."""
        load_dotenv(env_file)
        return cls(
            openai_api_key=_env_str("OPENAI_API_KEY"),
            openai_base_url=_env_str("OPENAI_BASE_URL") or None,
            model_article=_env_str("OPENAI_MODEL_ARTICLE", "gpt-5-mini"),
            model_util=_env_str("OPENAI_MODEL_UTIL") or None,
            model_fallback=_env_str("OPENAI_MODEL_FALLBACK", "gpt-4o-mini") or None,
            timeout=_env_float("OPENAI_TIMEOUT", 120.0),
            connect_timeout=_env_float("OPENAI_CONNECT_TIMEOUT", 10.0),
            app_debug=_env_bool("APP_DEBUG"),
            cache_dir=Path(_env_str("CACHE_DIR", "storage/cache")),
            log_dir=Path(_env_str("LOG_DIR", "storage/logs")),
            schema_dir=Path(_env_str("SCHEMA_DIR", str(DEFAULT_SCHEMA_DIR))),
            site_topic=_env_str("SITE_TOPIC", "camel milk"),
            min_sentences=_env_int("CONTENT_MIN_SENTENCES", 4),
            max_inline_citations=_env_int("MAX_INLINE_PMIDS", 3),
            idea_pool_cap=_env_int("IDEA_POOL_CAP", 2000),
            seed_max_iterations=_env_int("SEED_MAX_ITERATIONS", 50),
            reference_limit=_env_int("REFERENCE_LIMIT", 12),
            store_lock_timeout=_env_float("STORE_LOCK_TIMEOUT", 10.0),
        )


def configure_logging(settings: Settings, level: int = logging.INFO) -> logging.Logger:
    """Attach file + console handlers to the package logger (idempotent)."""
    logger = logging.getLogger("articlegen")
    logger.setLevel(logging.DEBUG if settings.app_debug else level)
    if getattr(logger, "_articlegen_configured", False):
        return logger

    formatter = logging.Formatter(LOG_FORMAT)
    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    try:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.log_dir / "app.log", encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    except OSError as e:
        logger.warning("Log file unavailable log_dir=%s error=%s", settings.log_dir, e)

    logger._articlegen_configured = True
    return logger

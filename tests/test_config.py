"""Environment parsing and logging setup."""

import logging
import os

from articlegen.config import DEFAULT_SCHEMA_DIR, Settings, configure_logging


def test_defaults(monkeypatch, tmp_path):
    for key in ("OPENAI_API_KEY", "OPENAI_MODEL_UTIL", "OPENAI_MODEL_ARTICLE", "APP_DEBUG", "SCHEMA_DIR"):
        monkeypatch.delenv(key, raising=False)
    s = Settings.from_env(env_file=str(tmp_path / "missing.env"))
    assert s.model_article == "gpt-5-mini"
    assert s.utility_model == "gpt-5-mini"
    assert s.model_fallback == "gpt-4o-mini"
    assert s.schema_dir == DEFAULT_SCHEMA_DIR
    assert not s.app_debug


def test_env_values_and_bad_numbers(monkeypatch, tmp_path):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-live")
    monkeypatch.setenv("OPENAI_MODEL_UTIL", "gpt-4o-mini")
    monkeypatch.setenv("APP_DEBUG", "true")
    monkeypatch.setenv("IDEA_POOL_CAP", "lots")
    monkeypatch.setenv("OPENAI_TIMEOUT", "30.5")
    monkeypatch.setenv("CACHE_DIR", str(tmp_path / "c"))
    s = Settings.from_env(env_file=str(tmp_path / "missing.env"))
    assert s.openai_api_key == "sk-live"
    assert s.utility_model == "gpt-4o-mini"
    assert s.app_debug
    assert s.idea_pool_cap == 2000
    assert s.timeout == 30.5
    assert s.cache_dir == tmp_path / "c"


def test_dotenv_file_is_loaded(monkeypatch, tmp_path):
    monkeypatch.delenv("SITE_TOPIC", raising=False)
    env = tmp_path / ".env"
    env.write_text("SITE_TOPIC=goat cheese\n", encoding="utf-8")
    try:
        assert Settings.from_env(env_file=str(env)).site_topic == "goat cheese"
    finally:
        os.environ.pop("SITE_TOPIC", None)


def test_configure_logging_once(settings):
    logger = configure_logging(settings)
    n = len(logger.handlers)
    configure_logging(settings)
    assert len(logger.handlers) == n
    assert (settings.log_dir / "app.log").exists()
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger._articlegen_configured = False
    assert logger.level == logging.INFO

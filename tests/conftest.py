"""Shared fixtures: isolated settings, fake OpenAI client and envelope/error builders."""

import json
import sys
from pathlib import Path
from unittest.mock import MagicMock

import httpx
import openai
import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from articlegen.config import Settings
from articlegen.llm import StructuredClient

API_URL = "https://api.openai.com/v1/responses"


def envelope(obj) -> dict:
    """Minimal Responses API body carrying `obj` as output_text."""
    return {"output_text": json.dumps(obj)}


def api_error(status: int, body: str = '{"error": {"message": "bad schema"}}'):
    request = httpx.Request("POST", API_URL)
    response = httpx.Response(status, request=request, text=body)
    cls = {
        400: openai.BadRequestError,
        422: openai.UnprocessableEntityError,
        500: openai.InternalServerError,
    }.get(status, openai.APIStatusError)
    return cls(f"Error code: {status}", response=response, body=None)


def connection_error():
    return openai.APIConnectionError(request=httpx.Request("POST", API_URL))


@pytest.fixture
def settings(tmp_path):
    return Settings(
        openai_api_key="sk-test",
        cache_dir=tmp_path / "cache",
        log_dir=tmp_path / "logs",
    )


@pytest.fixture
def fake_openai():
    """Stands in for openai.OpenAI; set `.responses.create.side_effect` per test."""
    return MagicMock()


@pytest.fixture
def client(settings, fake_openai):
    return StructuredClient(settings, client=fake_openai)

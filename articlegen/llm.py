# articlegen/llm.py
from __future__ import annotations
import json
import logging
import re
from typing import Any, Dict, Optional

import httpx
from openai import OpenAI
from openai import APIError, APIStatusError

from articlegen.config import Settings
from articlegen.errors import ConfigurationError, UpstreamError
from articlegen.extract import ResponseExtractor
from articlegen.models import ModelCallSpec

logger = logging.getLogger(__name__)

LOG_BODY_CHARS = 1000
ERROR_BODY_CHARS = 900


def _truncate(text: str, limit: int) -> str:
    text = re.sub(r"\s+", " ", text or "").strip()
    return text if len(text) <= limit else text[: limit - 1] + "…"


def _error_body(e: APIStatusError) -> str:
    try:
        return e.response.text
    except (AttributeError, httpx.ResponseNotRead):
        return json.dumps(e.body, default=str) if e.body is not None else ""


def _envelope(resp: Any) -> Any:
    """SDK response object -> plain dict (keeps the `output_text` convenience value)."""
    if isinstance(resp, dict):
        return resp
    if hasattr(resp, "model_dump"):
        data = resp.model_dump()
        text = getattr(resp, "output_text", None)
        if isinstance(text, str) and "output_text" not in data:
            data["output_text"] = text
        return data
    return resp


class StructuredClient:
    """
    Issues one logical "give me JSON" request against the Responses API.

    Degradation: strict json_schema -> json_object -> json_object on the fallback
    model. Only 400/422 move down the cascade; anything else propagates at once.
    """

    def __init__(self, settings: Settings, client: Optional[OpenAI] = None, extractor: Optional[ResponseExtractor] = None):
        self.settings = settings
        self._client = client
        self.extractor = extractor or ResponseExtractor()

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(
                api_key=self.settings.openai_api_key,
                base_url=self.settings.openai_base_url,
                timeout=httpx.Timeout(self.settings.timeout, connect=self.settings.connect_timeout),
                max_retries=0,  # the cascade below is the only retry policy
            )
        return self._client

    @staticmethod
    def _payload(spec: ModelCallSpec, model: str, strict: bool) -> Dict[str, Any]:
        if strict:
            fmt = {"type": "json_schema", "name": spec.schema_name, "schema": spec.json_schema, "strict": True}
        else:
            fmt = {"type": "json_object"}
        return {
            "model": model,
            "input": spec.input_blocks,
            "temperature": spec.temperature,
            "text": {"format": fmt},
        }

    def _failure_message(self, status: int, body: str) -> str:
        msg = f"OpenAI request failed: {status}"
        if self.settings.app_debug and body:
            msg += " - " + _truncate(body, ERROR_BODY_CHARS)
        return msg

    def _attempt(self, mode: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        client = self._get_client()
        try:
            resp = client.responses.create(**payload)
        except APIStatusError as e:
            status = e.status_code
            body = _error_body(e)
            logger.error("OpenAI %s call failed model=%s status=%s body=%s",
                         mode, payload["model"], status, _truncate(body, LOG_BODY_CHARS))
            kept = body if self.settings.app_debug else ""
            raise UpstreamError(self._failure_message(status, body), status_code=status, body=kept) from e
        except APIError as e:
            # transport failures and unparseable SDK responses carry no usable status
            logger.error("OpenAI %s call failed model=%s status=0 error=%s", mode, payload["model"], e)
            raise UpstreamError(self._failure_message(0, ""), status_code=0) from e

        envelope = _envelope(resp)
        logger.info("OpenAI %s call ok model=%s status=200", mode, payload["model"])
        logger.debug("OpenAI %s body=%s", mode, _truncate(json.dumps(envelope, default=str), LOG_BODY_CHARS))
        return self.extractor.extract(envelope)

    def call(self, spec: ModelCallSpec) -> Dict[str, Any]:
        if not self.settings.openai_api_key:
            raise ConfigurationError("OPENAI_API_KEY is not set.")

        try:
            return self._attempt("json_schema", self._payload(spec, spec.model, strict=True))
        except UpstreamError as e:
            if not e.is_client_error:
                raise

        try:
            return self._attempt("json_object", self._payload(spec, spec.model, strict=False))
        except UpstreamError as e:
            if not e.is_client_error:
                raise
            last = e

        fallback = self.settings.model_fallback
        if fallback and fallback != spec.model:
            return self._attempt("fallback", self._payload(spec, fallback, strict=False))
        raise last

# articlegen/extract.py
"""
Pull the JSON object out of a Responses API envelope.

The envelope shape has moved between API versions, so extraction is an ordered list of
small strategies. Each takes the envelope dict and returns a dict or None; the first
non-None wins.
"""
from __future__ import annotations
import json
import logging
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Sequence

from articlegen.errors import SchemaMismatchError

logger = logging.getLogger(__name__)

Strategy = Callable[[Dict[str, Any]], Optional[Dict[str, Any]]]


def parse_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Decode text as a JSON object; tolerate code fences or prose around it."""
    raw = (text or "").strip()
    if not raw:
        return None
    try:
        obj = json.loads(raw)
        return obj if isinstance(obj, dict) else None
    except json.JSONDecodeError:
        pass

    start = raw.find("{")
    end = raw.rfind("}")
    if start >= 0 and end > start:
        try:
            obj = json.loads(raw[start : end + 1])
        except json.JSONDecodeError:
            return None
        return obj if isinstance(obj, dict) else None
    return None


def _content_blocks(envelope: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
    output = envelope.get("output")
    if not isinstance(output, list):
        return
    for item in output:
        if not isinstance(item, dict):
            continue
        content = item.get("content")
        if not isinstance(content, list):
            continue
        for block in content:
            if isinstance(block, dict):
                yield block


def structured_field(envelope: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Already-typed object on a content block (`parsed` / `json`)."""
    for block in _content_blocks(envelope):
        for key in ("parsed", "json"):
            value = block.get(key)
            if isinstance(value, dict):
                return value
    return None


def flattened_text(envelope: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Top-level `output_text` holding the whole JSON document."""
    text = envelope.get("output_text")
    if isinstance(text, str) and text.strip():
        return parse_json_object(text)
    return None


def scanned_blocks(envelope: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """First content block whose `text` decodes, across all output items in order."""
    for block in _content_blocks(envelope):
        text = block.get("text")
        if isinstance(text, str) and text.strip():
            obj = parse_json_object(text)
            if obj is not None:
                return obj
    return None


DEFAULT_STRATEGIES: Sequence[Strategy] = (structured_field, flattened_text, scanned_blocks)


class ResponseExtractor:
    def __init__(self, strategies: Iterable[Strategy] = DEFAULT_STRATEGIES):
        self.strategies = list(strategies)

    def extract(self, envelope: Any) -> Dict[str, Any]:
        if not isinstance(envelope, dict):
            raise SchemaMismatchError("OpenAI returned invalid JSON.")
        for strategy in self.strategies:
            out = strategy(envelope)
            if out is not None:
                return out
        sample = json.dumps(envelope, ensure_ascii=False, default=str)[:1000]
        logger.error("OpenAI unexpected shape sample=%s", sample)
        raise SchemaMismatchError("Structured output not JSON.")

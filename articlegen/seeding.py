# articlegen/seeding.py
from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, Optional

from articlegen.config import Settings
from articlegen.content_guidelines import SUPPORTED_LANGUAGES
from articlegen.errors import UpstreamError, ValidationError
from articlegen.idea_store import IdeaStore, to_idea_record
from articlegen.llm import StructuredClient
from articlegen.models import IdeaRecord, SeedResult
from articlegen.prompt_factory import make_ideas_call
from articlegen.schemas import load_schema

logger = logging.getLogger(__name__)

MIN_BATCH = 10


def ideas_from_payload(data: Dict[str, Any]) -> List[IdeaRecord]:
    """Rows under `ideas` (or `items`); anything that is not a usable idea is dropped."""
    rows = data.get("ideas")
    if not isinstance(rows, list):
        rows = data.get("items")
    if not isinstance(rows, list):
        return []
    return [rec for rec in (to_idea_record(r) for r in rows) if rec is not None]


class IdeaSeeder:
    """Fills a language's idea pool up to a target by repeated batch requests."""

    def __init__(
        self,
        client: StructuredClient,
        settings: Settings,
        store_factory: Optional[Callable[[str], IdeaStore]] = None,
    ):
        self.client = client
        self.settings = settings
        self.store_factory = store_factory or self._default_store

    def _default_store(self, lang: str) -> IdeaStore:
        return IdeaStore(
            lang,
            self.settings.cache_dir,
            cap=self.settings.idea_pool_cap,
            lock_timeout=self.settings.store_lock_timeout,
        )

    def request_batch(self, lang: str, seeds: List[str], count: int) -> List[IdeaRecord]:
        schema = load_schema(self.settings.schema_dir, "ideas")
        spec = make_ideas_call(lang, seeds, count, self.settings.site_topic, schema, self.settings.utility_model)
        return ideas_from_payload(self.client.call(spec))

    def seed(self, lang: str, target: int, batch: int, seeds: Optional[List[str]] = None) -> SeedResult:
        lang = (lang or "").strip().lower()
        if lang not in SUPPORTED_LANGUAGES:
            raise ValidationError(f"unsupported language '{lang}'")
        if target < 1:
            raise ValidationError("target must be at least 1")
        if batch < MIN_BATCH:
            raise ValidationError(f"batch must be at least {MIN_BATCH}")
        seeds = [s.strip() for s in seeds or [] if s and s.strip()] or [self.settings.site_topic]

        store = self.store_factory(lang)
        result = SeedResult(lang=lang, target=target, count=store.count(), batch_size=batch)
        guard = 0

        while guard < self.settings.seed_max_iterations:
            if result.count >= target:
                result.stop_reason = "target_reached"
                break
            result.iterations += 1
            try:
                ideas = self.request_batch(lang, seeds, result.batch_size)
            except UpstreamError as e:
                e.progress = result
                logger.error("Seeding aborted lang=%s added=%d status=%s", lang, result.added, e.status_code)
                raise

            if not ideas:
                result.batch_size = max(MIN_BATCH, result.batch_size // 2)
                logger.info("Empty idea batch lang=%s next_batch=%d", lang, result.batch_size)
                guard += 1
                continue

            added = store.add_ideas(ideas)
            result.added += added
            result.count = store.count()
            if added == 0:
                result.stop_reason = "exhausted"
                break
            guard += 1
        else:
            result.stop_reason = "target_reached" if result.count >= target else "guard"

        logger.info(
            "Seeding done lang=%s target=%d count=%d added=%d iterations=%d reason=%s",
            lang, target, result.count, result.added, result.iterations, result.stop_reason,
        )
        return result

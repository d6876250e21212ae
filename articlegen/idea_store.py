# articlegen/idea_store.py
from __future__ import annotations
import json
import logging
import os
import random
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from filelock import FileLock, Timeout
from pydantic import ValidationError as PydanticValidationError

from articlegen.errors import StorageError
from articlegen.models import IdeaPool, IdeaRecord

logger = logging.getLogger(__name__)

DEFAULT_CAP = 2000

# On disk: {"ideas": [...], "index": {"<title>|<pk>": 1}}
# The index is a cache; it is rebuilt from the records on every load.


def to_idea_record(item: Union[IdeaRecord, Dict[str, Any]]) -> Optional[IdeaRecord]:
    if isinstance(item, IdeaRecord):
        return item
    if not isinstance(item, dict):
        return None
    try:
        return IdeaRecord.model_validate(item)
    except PydanticValidationError:
        return None


class IdeaStore:
    """Per-language, deduplicated, capped pool of article ideas backed by one JSON file."""

    def __init__(
        self,
        lang: str,
        cache_dir: Path,
        cap: int = DEFAULT_CAP,
        rng: Optional[random.Random] = None,
        lock_timeout: float = 10.0,
    ):
        self.lang = lang
        self.cache_dir = Path(cache_dir)
        self.cap = cap
        self.rng = rng or random.Random()
        self.path = self.cache_dir / f"ideas_{lang}.json"
        self.lock = FileLock(str(self.path) + ".lock", timeout=lock_timeout)

    # ---------- file io ----------

    def _read(self) -> IdeaPool:
        if not self.path.exists():
            return IdeaPool()
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StorageError(f"cannot read {self.path}: {e}") from e
        if not isinstance(raw, dict):
            raise StorageError(f"{self.path} is not a JSON object")

        pool = IdeaPool()
        for item in raw.get("ideas") or []:
            rec = to_idea_record(item)
            if rec is None or rec.identity_key in pool.index:
                continue
            pool.index[rec.identity_key] = 1
            pool.ideas.append(rec)
        return pool

    def _write(self, pool: IdeaPool) -> None:
        data = {
            "ideas": [r.model_dump() for r in pool.ideas],
            "index": pool.index,
        }
        tmp = None
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.cache_dir, prefix=self.path.name, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except OSError as e:
            if tmp and os.path.exists(tmp):
                os.unlink(tmp)
            raise StorageError(f"cannot write {self.path}: {e}") from e

    def load(self) -> IdeaPool:
        try:
            return self._read()
        except StorageError as e:
            logger.error("Idea pool unreadable lang=%s path=%s error=%s", self.lang, self.path, e)
            return IdeaPool()

    # ---------- public api ----------

    def add_ideas(self, records: Iterable[Union[IdeaRecord, Dict[str, Any]]], cap: Optional[int] = None) -> int:
        """Merge new ideas into the pool. Returns how many were actually added."""
        limit = self.cap if cap is None else cap
        try:
            with self.lock:
                pool = self.load()
                added = 0
                for item in records:
                    if len(pool.ideas) >= limit:
                        break
                    rec = to_idea_record(item)
                    if rec is None:
                        continue
                    key = rec.identity_key
                    if key in pool.index:
                        continue
                    pool.index[key] = 1
                    pool.ideas.append(rec)
                    added += 1

                if added:
                    try:
                        self._write(pool)
                    except StorageError as e:
                        logger.error("Idea pool write failed lang=%s error=%s", self.lang, e)
        except Timeout:
            logger.error("Idea pool lock timeout lang=%s lock=%s", self.lang, self.lock.lock_file)
            return 0

        logger.info("Idea pool merge lang=%s added=%d total=%d", self.lang, added, len(pool.ideas))
        return added

    def list(self, limit: int = 100, shuffle: bool = True) -> List[IdeaRecord]:
        ideas = self.load().ideas
        if shuffle:
            self.rng.shuffle(ideas)
        return ideas[: max(1, limit)]

    def count(self) -> int:
        return len(self.load().ideas)

# articlegen/references.py
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import List, Protocol, Sequence

from pydantic import ValidationError as PydanticValidationError

from articlegen.errors import ConfigurationError
from articlegen.models import ReferenceRecord

logger = logging.getLogger(__name__)


class ReferenceLookup(Protocol):
    def lookup(self, lang: str, keywords: Sequence[str], limit: int) -> List[ReferenceRecord]:
        ...


class JsonlReferenceLookup:
    """
    Reference records from a JSONL file, one {"pmid", "title", "url", "excerpt"} per line.
    Matches on keyword mention in title or excerpt; if nothing matches, returns the head of the file.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._records: List[ReferenceRecord] | None = None

    def _load(self) -> List[ReferenceRecord]:
        if self._records is not None:
            return self._records
        if not self.path.exists():
            raise ConfigurationError(f"reference file not found: {self.path}")
        out: List[ReferenceRecord] = []
        seen = set()
        with open(self.path, "r", encoding="utf-8") as f:
            for n, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    rec = ReferenceRecord.model_validate(json.loads(line))
                except (ValueError, PydanticValidationError) as e:
                    logger.warning("Skipping reference line=%d path=%s error=%s", n, self.path, e)
                    continue
                if rec.pmid and rec.pmid not in seen:
                    seen.add(rec.pmid)
                    out.append(rec)
        self._records = out
        return out

    def lookup(self, lang: str, keywords: Sequence[str], limit: int) -> List[ReferenceRecord]:
        records = self._load()
        terms = [k.lower() for k in keywords if k and k.strip()]
        hits = [
            r for r in records
            if any(t in r.title.lower() or t in r.excerpt.lower() for t in terms)
        ]
        picked = (hits or records)[: max(0, limit)]
        logger.info("Reference lookup lang=%s kw=%s matched=%d returned=%d", lang, list(keywords), len(hits), len(picked))
        return picked

# articlegen/citations.py
from __future__ import annotations
import re
from typing import Iterable, List

from articlegen.models import ReferenceRecord

# [PMID:12345678], optional space after the colon; leading whitespace goes with the marker.
# Any digit run is accepted, short ids included.
PMID_MARKER = re.compile(r"\s*\[PMID:\s*(\d+)\]", re.IGNORECASE)


def allowed_identifiers(refs: Iterable[ReferenceRecord]) -> List[str]:
    """Ordered, unique, non-empty identifiers of the supplied references."""
    out: List[str] = []
    for r in refs:
        pmid = (r.pmid or "").strip()
        if pmid and pmid not in out:
            out.append(pmid)
    return out


def enforce_citation_policy(body: str, policy: str, max_inline: int, allowed: Iterable[str]) -> str:
    """
    Rewrite inline [PMID:...] markers in one left-to-right pass.

    none    -> every marker removed.
    limited -> keep a marker only while fewer than `max_inline` are kept, the id is in
               `allowed` and the id was not kept earlier. Everything else is removed.
    """
    body = body or ""
    if policy == "none":
        return PMID_MARKER.sub("", body)
    if policy != "limited":
        raise ValueError(f"unresolved citation policy '{policy}'")

    allowed_set = {a for a in allowed if a}
    seen: set[str] = set()

    def _keep_or_drop(m: re.Match) -> str:
        pmid = m.group(1)
        if len(seen) >= max_inline or pmid not in allowed_set or pmid in seen:
            return ""
        seen.add(pmid)
        return f" [PMID:{pmid}]"

    return PMID_MARKER.sub(_keep_or_drop, body)


def count_markers(body: str) -> int:
    return len(PMID_MARKER.findall(body or ""))

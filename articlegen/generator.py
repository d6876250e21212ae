# articlegen/generator.py
from __future__ import annotations
import hashlib
import json
import logging
import random
import re
import time
from typing import Any, Callable, Dict, List, Optional, Sequence

from articlegen.citations import allowed_identifiers, count_markers, enforce_citation_policy
from articlegen.config import Settings
from articlegen.content_guidelines import LEAD_STYLES, MAX_REFERENCES, get_boilerplate_intros, get_temperature
from articlegen.llm import StructuredClient
from articlegen.models import FaqItem, GeneratedArticle, GenerationRequest, ReferenceRecord
from articlegen.prompt_factory import make_article_call
from articlegen.schemas import load_schema
from articlegen.validators import acceptance_problems

logger = logging.getLogger(__name__)

SUMMARY_CHARS = 170


# ---------- shape coercion ----------

def slugify(s: str) -> str:
    s = re.sub(r"[\W_]+", "-", (s or "").lower()).strip("-")
    return s or "article"


def summarize(text: str, max_chars: int = SUMMARY_CHARS) -> str:
    t = re.sub(r"\s+", " ", text or "").strip()
    if len(t) <= max_chars:
        return t
    return t[: max_chars - 1].rstrip() + "…"


def tag_from_subject(subject: str) -> str:
    """First three words of the subject, ascii-only, hyphenated."""
    t = re.sub(r"[^A-Za-z0-9 ]+", "", (subject or "").strip())
    parts = t.split()
    return "-".join(parts[:3]).lower() or "topic"


def _coerce_faq(raw: Dict[str, Any]) -> List[FaqItem]:
    items = raw.get("faq")
    if not isinstance(items, list):
        items = raw.get("faqs")
    faq = []
    for it in items if isinstance(items, list) else []:
        if not isinstance(it, dict):
            continue
        q = str(it.get("q") or it.get("question") or "").strip()
        a = str(it.get("a") or it.get("answer") or "").strip()
        if q and a:
            faq.append(FaqItem(q=q, a=a))
    return faq


def _coerce_references(raw: Dict[str, Any], refs: Sequence[ReferenceRecord]) -> List[ReferenceRecord]:
    by_id = {r.pmid: r for r in refs if r.pmid}
    picked: List[ReferenceRecord] = []
    items = raw.get("references")
    for it in items if isinstance(items, list) else []:
        pmid = str(it.get("pmid") or "").strip() if isinstance(it, dict) else ""
        ref = by_id.get(pmid)
        if ref is not None and ref not in picked:
            picked.append(ref)
    if not picked:
        picked = list(by_id.values())
    return picked[:MAX_REFERENCES]


def coerce_article(raw: Dict[str, Any], subject: str, refs: Sequence[ReferenceRecord], site_topic: str) -> GeneratedArticle:
    """Fill gaps in whatever the model returned so it fits GeneratedArticle."""
    body = raw.get("body_markdown")
    if not isinstance(body, str) or not body.strip():
        body = raw.get("article") if isinstance(raw.get("article"), str) else ""

    title = str(raw.get("title") or "").strip() or subject
    slug = str(raw.get("slug") or "").strip() or slugify(title)
    summary = str(raw.get("summary") or "").strip() or summarize(body or subject)

    tags = [str(t).strip() for t in raw.get("tags") or [] if str(t).strip()] if isinstance(raw.get("tags"), list) else []
    if not tags:
        tags = list(dict.fromkeys(t for t in [site_topic, tag_from_subject(subject)] if t))

    return GeneratedArticle(
        title=title,
        slug=slug,
        summary=summary,
        body_markdown=body,
        faq=_coerce_faq(raw),
        references=_coerce_references(raw, refs),
        tags=tags,
        subject=subject,
    )


# ---------- orchestration ----------

class ArticleGenerator:
    """
    Generate, check, and (at most once) regenerate an article.

    rng and clock are injectable so lead style, citation coin flip and retry nonce can be
    pinned in tests.
    """

    def __init__(
        self,
        client: StructuredClient,
        settings: Settings,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.client = client
        self.settings = settings
        self.rng = rng or random.Random()
        self.clock = clock

    def _pick_lead(self, exclude: Optional[str] = None) -> str:
        options = [s for s in LEAD_STYLES if s != exclude] or list(LEAD_STYLES)
        return self.rng.choice(options)

    def resolve(self, request: GenerationRequest) -> GenerationRequest:
        """Concrete copy of the request: no `auto`, no unset controls, seed bans attached."""
        mode = request.citation_mode
        if mode == "auto":
            mode = "none" if self.rng.randrange(2) == 0 else "limited"
        bans = list(dict.fromkeys(get_boilerplate_intros() + request.ban_phrases))
        return request.model_copy(update={
            "citation_mode": mode,
            "lead_style": request.lead_style or self._pick_lead(),
            "min_sentences_per_paragraph": request.min_sentences_per_paragraph or self.settings.min_sentences,
            "max_inline_citations": (
                request.max_inline_citations
                if request.max_inline_citations is not None
                else self.settings.max_inline_citations
            ),
            "ban_phrases": bans,
        })

    def nonce(self, request: GenerationRequest) -> str:
        seed = json.dumps([request.keywords, request.subject, self.clock()], ensure_ascii=False)
        return hashlib.sha256(seed.encode("utf-8")).hexdigest()[:12]

    def _attempt(self, request: GenerationRequest, refs: Sequence[ReferenceRecord], allowed: List[str], schema: Dict[str, Any]) -> GeneratedArticle:
        spec = make_article_call(request, refs, allowed, schema, self.settings.model_article)
        raw = self.client.call(spec)
        article = coerce_article(raw, request.subject, refs, self.settings.site_topic)
        article.body_markdown = enforce_citation_policy(
            article.body_markdown, request.citation_mode, request.max_inline_citations, allowed
        )
        article.lead_style = request.lead_style
        article.citation_mode = request.citation_mode
        return article

    def generate(self, request: GenerationRequest, refs: Sequence[ReferenceRecord]) -> GeneratedArticle:
        schema = load_schema(self.settings.schema_dir, "article")
        allowed = allowed_identifiers(refs)
        req = self.resolve(request)

        article = self._attempt(req, refs, allowed, schema)
        problems = acceptance_problems(article, req.ban_phrases, req.min_sentences_per_paragraph)
        attempts = 1

        if problems:
            logger.info("Retrying generation with alternate lead reasons=%s", problems)
            req = req.model_copy(update={
                "lead_style": self._pick_lead(exclude=req.lead_style),
                "temperature": min(2.0, max(get_temperature("article", attempt=2), req.temperature + 0.1)),
                "ban_phrases": req.ban_phrases + [self.nonce(req)],
            })
            article = self._attempt(req, refs, allowed, schema)
            problems = acceptance_problems(article, req.ban_phrases, req.min_sentences_per_paragraph)
            attempts = 2

        article.attempts = attempts
        article.accepted = not problems
        logger.info(
            "Generated article lang=%s subject=%r kw=%s pmids=%s mode=%s inline=%d attempts=%d accepted=%s",
            req.lang, req.subject, req.keywords, allowed, req.citation_mode,
            count_markers(article.body_markdown), attempts, article.accepted,
        )
        return article

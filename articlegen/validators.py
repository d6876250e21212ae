# articlegen/validators.py
import re
from typing import List, Sequence

from articlegen.models import GeneratedArticle

PARAGRAPH_BREAK = re.compile(r"\n{2,}")
SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")
MIN_SENTENCE_CHARS = 20  # anything shorter is a fragment, not a sentence


def split_paragraphs(markdown: str) -> List[str]:
    text = (markdown or "").replace("\r", "").strip()
    if not text:
        return []
    return [p.strip() for p in PARAGRAPH_BREAK.split(text)]


def count_sentences(paragraph: str) -> int:
    parts = SENTENCE_BREAK.split(paragraph.strip())
    return len([s for s in parts if len(s.strip()) >= MIN_SENTENCE_CHARS])


def sentence_counts_per_paragraph(markdown: str) -> List[int]:
    return [count_sentences(p) for p in split_paragraphs(markdown)]


def intro_contains_banned(markdown: str, ban_phrases: Sequence[str]) -> bool:
    """True when the first paragraph contains any banned phrase (case-insensitive)."""
    paras = split_paragraphs(markdown)
    low = paras[0].lower() if paras else ""
    return any(b and b.lower() in low for b in ban_phrases)


def acceptance_problems(article: GeneratedArticle, ban_phrases: Sequence[str], min_sentences: int) -> List[str]:
    """Reasons the article must be regenerated. Empty list means accept."""
    errs = []
    body = article.body_markdown or ""
    if not body.strip():
        errs.append("Body is empty.")
        return errs

    if intro_contains_banned(body, ban_phrases):
        errs.append("Opening paragraph reuses a banned phrase.")

    short = [i + 1 for i, c in enumerate(sentence_counts_per_paragraph(body)) if c < min_sentences]
    if short:
        errs.append(f"{len(short)} paragraph(s) under {min_sentences} sentences: {short}")
    return errs


def needs_regeneration(article: GeneratedArticle, ban_phrases: Sequence[str], min_sentences: int) -> bool:
    return bool(acceptance_problems(article, ban_phrases, min_sentences))

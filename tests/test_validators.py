"""Acceptance checks on generated articles."""

from articlegen.models import GeneratedArticle
from articlegen.validators import (
    acceptance_problems,
    count_sentences,
    intro_contains_banned,
    needs_regeneration,
    split_paragraphs,
)

LONG = "Camel milk contains lactoferrin in notable amounts."


def para(n):
    return " ".join([LONG] * n)


def article(body):
    return GeneratedArticle(title="T", slug="t", summary="s", body_markdown=body, subject="camel milk")


def test_short_second_paragraph_is_flagged():
    body = para(4) + "\n\n" + para(2)
    assert needs_regeneration(article(body), [], 4)
    assert "[2]" in acceptance_problems(article(body), [], 4)[0]


def test_full_paragraphs_pass():
    body = para(4) + "\n\n" + para(5)
    assert acceptance_problems(article(body), [], 4) == []


def test_fragments_are_not_sentences():
    assert count_sentences("Yes. No. Maybe so. " + LONG) == 1


def test_banned_phrase_in_intro_only():
    banned = ["Camel milk has garnered increasing attention"]
    intro = "Camel milk has garnered increasing attention lately. " + para(3)
    assert intro_contains_banned(intro + "\n\n" + para(4), banned)
    assert not intro_contains_banned(para(4) + "\n\n" + intro, banned)


def test_banned_phrase_case_insensitive():
    assert intro_contains_banned("CAMEL MILK HAS GARNERED INCREASING ATTENTION.", ["camel milk has garnered"])


def test_empty_body():
    assert acceptance_problems(article("  "), [], 4) == ["Body is empty."]


def test_paragraph_split_handles_crlf():
    assert split_paragraphs("a\r\n\r\nb\n\n\nc") == ["a", "b", "c"]

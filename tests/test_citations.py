"""Inline citation policy."""

import re

import pytest

from articlegen.citations import allowed_identifiers, count_markers, enforce_citation_policy
from articlegen.models import ReferenceRecord

MARKER = re.compile(r"\[PMID:\s*(\d+)\]", re.I)


def test_none_removes_every_marker():
    out = enforce_citation_policy("Evidence supports this [PMID:12345678].", "none", 3, ["12345678"])
    assert "[PMID:" not in out
    assert out == "Evidence supports this."


def test_limited_caps_and_dedups_in_order():
    body = "A [PMID:111]. B [PMID:222]. C [PMID:111]. D [PMID:333]."
    out = enforce_citation_policy(body, "limited", 2, ["111", "222", "333"])
    assert MARKER.findall(out) == ["111", "222"]
    assert out == "A [PMID:111]. B [PMID:222]. C. D."


def test_limited_drops_unknown_ids():
    body = "One [PMID:12345678]. Two [PMID:87654321]."
    out = enforce_citation_policy(body, "limited", 5, ["87654321"])
    assert MARKER.findall(out) == ["87654321"]


def test_markers_are_normalised():
    out = enforce_citation_policy("Milk proteins[pmid: 12345678] matter.", "limited", 3, ["12345678"])
    assert out == "Milk proteins [PMID:12345678] matter."


def test_zero_max_keeps_nothing():
    out = enforce_citation_policy("X [PMID:12345678].", "limited", 0, ["12345678"])
    assert count_markers(out) == 0


def test_unresolved_policy_is_rejected():
    with pytest.raises(ValueError):
        enforce_citation_policy("text", "auto", 3, [])


def test_allowed_identifiers_unique_and_ordered():
    refs = [ReferenceRecord(pmid="222"), ReferenceRecord(pmid="111"), ReferenceRecord(pmid="222"), ReferenceRecord(pmid="")]
    assert allowed_identifiers(refs) == ["222", "111"]

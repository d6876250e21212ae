"""JSONL reference lookup."""

import json

import pytest

from articlegen.errors import ConfigurationError
from articlegen.references import JsonlReferenceLookup


@pytest.fixture
def refs_file(tmp_path):
    rows = [
        {"pmid": "11111111", "title": "Camel milk and insulin", "excerpt": "Type 1 diabetes cohort."},
        {"pmid": "22222222", "title": "Lactoferrin review", "excerpt": "Found in camel milk whey."},
        {"pmid": "33333333", "title": "Goat cheese ripening", "excerpt": ""},
        {"pmid": "11111111", "title": "Duplicate", "excerpt": ""},
    ]
    path = tmp_path / "refs.jsonl"
    path.write_text("\n".join(json.dumps(r) for r in rows) + "\nnot json\n\n", encoding="utf-8")
    return path


def test_keyword_matches(refs_file):
    got = JsonlReferenceLookup(refs_file).lookup("en", ["Camel Milk"], 10)
    assert [r.pmid for r in got] == ["11111111", "22222222"]
    assert got[0].url == "https://pubmed.ncbi.nlm.nih.gov/11111111/"


def test_falls_back_to_all_and_caps(refs_file):
    got = JsonlReferenceLookup(refs_file).lookup("en", ["yak butter"], 2)
    assert [r.pmid for r in got] == ["11111111", "22222222"]


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        JsonlReferenceLookup(tmp_path / "nope.jsonl").lookup("en", ["x"], 3)

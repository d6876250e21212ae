"""Request and record validation."""

import pytest

from articlegen.errors import ValidationError
from articlegen.models import GenerationRequest, IdeaRecord, ReferenceRecord, identity_key


def test_camel_case_payload():
    req = GenerationRequest.from_payload({
        "lang": "DE",
        "keywords": ["Kamelmilch", " ", "Kamelmilch", "Laktose"],
        "faqCount": 4,
        "pmidPolicy": "limited",
        "maxInlinePmids": 2,
        "leadStyle": "analogy",
        "banPhrases": ["Seit jeher"],
    })
    assert req.lang == "de"
    assert req.keywords == ["Kamelmilch", "Laktose"]
    assert req.subject == "Kamelmilch, Laktose"
    assert (req.faq_count, req.citation_mode, req.max_inline_citations) == (4, "limited", 2)
    assert req.lead_style == "analogy"
    assert req.paragraphs == 9


@pytest.mark.parametrize("payload", [
    {"lang": "en", "keywords": []},
    {"lang": "jp", "keywords": ["x"]},
    {"lang": "en", "keywords": ["x"], "pmidPolicy": "some"},
    {"lang": "en", "keywords": ["x"], "leadStyle": "shouting"},
    {"keywords": ["x"]},
])
def test_bad_requests(payload):
    with pytest.raises(ValidationError):
        GenerationRequest.from_payload(payload)


def test_reference_default_url():
    assert ReferenceRecord(pmid=12345678).url == "https://pubmed.ncbi.nlm.nih.gov/12345678/"


def test_idea_aliases_and_key():
    rec = IdeaRecord.model_validate({"title": " Camel   Milk 101 ", "primaryKeyword": "Camel Milk",
                                     "secondary_keywords": ["a", "a", "b"], "category": "basics", "intent": "informational"})
    assert rec.supporting_keywords == ["a", "b"]
    assert rec.angle == "basics"
    assert rec.identity_key == identity_key("camel milk 101", "camel milk") == "camel milk 101|camel milk"

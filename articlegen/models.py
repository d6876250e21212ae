# articlegen/models.py
from __future__ import annotations
import re
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from articlegen.content_guidelines import DEFAULT_STYLE_FLAGS, LEAD_STYLES, SUPPORTED_LANGUAGES
from articlegen.errors import ValidationError

CitationMode = Literal["none", "limited", "auto"]


def _clean_list(values: Any) -> List[str]:
    """Strip entries, drop blanks and repeats, keep first-seen order."""
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    out: List[str] = []
    for v in values:
        s = str(v or "").strip()
        if s and s not in out:
            out.append(s)
    return out


class GenerationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    lang: str
    subject: str = ""
    keywords: List[str]
    paragraphs: int = Field(9, ge=1, le=40)
    faq_count: int = Field(8, ge=0, le=30, alias="faqCount")
    style_flags: List[str] = Field(default_factory=lambda: list(DEFAULT_STYLE_FLAGS), alias="styleFlags")
    special_requirements: str = Field("", alias="specialRequirements")
    min_sentences_per_paragraph: Optional[int] = Field(None, ge=1, alias="minSentencesPerParagraph")
    citation_mode: CitationMode = Field("auto", alias="pmidPolicy")
    max_inline_citations: Optional[int] = Field(None, ge=0, alias="maxInlinePmids")
    ban_phrases: List[str] = Field(default_factory=list, alias="banPhrases")
    lead_style: Optional[str] = Field(None, alias="leadStyle")
    temperature: float = Field(0.45, ge=0.0, le=2.0)

    @field_validator("lang")
    @classmethod
    def _known_lang(cls, v: str) -> str:
        v = (v or "").strip().lower()
        if v not in SUPPORTED_LANGUAGES:
            raise ValueError(f"unsupported language '{v}'")
        return v

    @field_validator("keywords", "style_flags", "ban_phrases", mode="before")
    @classmethod
    def _clean(cls, v: Any) -> List[str]:
        return _clean_list(v)

    @field_validator("keywords")
    @classmethod
    def _need_keywords(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("at least one keyword is required")
        return v

    @field_validator("lead_style", mode="before")
    @classmethod
    def _known_lead(cls, v: Any) -> Optional[str]:
        if v is None or str(v).strip() == "":
            return None
        v = str(v).strip()
        if v not in LEAD_STYLES:
            raise ValueError(f"unknown lead style '{v}'")
        return v

    @model_validator(mode="after")
    def _default_subject(self) -> "GenerationRequest":
        self.subject = (self.subject or "").strip() or ", ".join(self.keywords)
        return self

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "GenerationRequest":
        """Build from a loose JSON payload; pydantic failures become ValidationError."""
        try:
            return cls.model_validate(data or {})
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid generation request: {e}") from e


class ReferenceRecord(BaseModel):
    pmid: str
    title: str = ""
    url: str = ""
    excerpt: str = ""

    @field_validator("pmid", mode="before")
    @classmethod
    def _as_str(cls, v: Any) -> str:
        return str(v if v is not None else "").strip()

    @model_validator(mode="after")
    def _default_url(self) -> "ReferenceRecord":
        if not self.url and self.pmid:
            self.url = f"https://pubmed.ncbi.nlm.nih.gov/{self.pmid}/"
        return self


class FaqItem(BaseModel):
    q: str
    a: str


class GeneratedArticle(BaseModel):
    title: str
    slug: str
    summary: str
    body_markdown: str
    faq: List[FaqItem] = []
    references: List[ReferenceRecord] = []
    tags: List[str] = []
    subject: str
    # run metadata
    lead_style: str = ""
    citation_mode: Literal["none", "limited"] = "none"
    attempts: int = 1
    accepted: bool = True


_WS = re.compile(r"\s+")


class IdeaRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    primary_keyword: str = Field(alias="primaryKeyword")
    supporting_keywords: List[str] = Field(default_factory=list, alias="secondary_keywords")
    angle: str = Field("", alias="category")
    search_intent: str = Field("", alias="intent")

    @field_validator("title", "primary_keyword", mode="before")
    @classmethod
    def _required_text(cls, v: Any) -> str:
        s = str(v or "").strip()
        if not s:
            raise ValueError("must not be blank")
        return s

    @field_validator("supporting_keywords", mode="before")
    @classmethod
    def _clean(cls, v: Any) -> List[str]:
        return _clean_list(v)

    @field_validator("angle", "search_intent", mode="before")
    @classmethod
    def _optional_text(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @property
    def identity_key(self) -> str:
        return identity_key(self.title, self.primary_keyword)


def identity_key(title: str, primary_keyword: str) -> str:
    """Normalised (title, primary keyword) pair used for dedup."""
    return _WS.sub(" ", title.strip()).lower() + "|" + primary_keyword.strip().lower()


class IdeaPool(BaseModel):
    ideas: List[IdeaRecord] = []
    index: Dict[str, int] = {}


class ModelCallSpec(BaseModel):
    model: str
    input_blocks: List[Dict[str, Any]]
    schema_name: str
    json_schema: Dict[str, Any]
    temperature: float = 0.45


class SeedResult(BaseModel):
    lang: str
    target: int
    count: int
    added: int = 0
    iterations: int = 0
    batch_size: int
    stop_reason: Literal["target_reached", "exhausted", "guard"] = "guard"

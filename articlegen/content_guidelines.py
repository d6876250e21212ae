"""
Editorial guidelines for evidence-based articles.
Defines lead styles, boilerplate intros to ban, citation wording and temperatures.
"""

SUPPORTED_LANGUAGES = ("en", "de", "fr", "it", "es", "sv", "fi", "nl", "pl", "cs")

LEAD_STYLES = (
    "question",
    "surprising-stat",
    "myth-busting",
    "historical-note",
    "case-context",
    "analogy",
)

DEFAULT_STYLE_FLAGS = ["human-like", "evidence-based"]

# Template plans sample from these when the caller asks for variety but sends no flags
TEMPLATE_STYLE_FLAGS = ("clean", "airy", "modern", "serifish", "boxed", "outlined", "lined")

GUIDELINES = {
    "core_principles": {
        "evidence_first": {
            "description": "Summarize evidence and mechanisms neutrally. Never give medical advice.",
            "prohibited_claims": [
                "cures",
                "miracle",
                "guaranteed results",
                "clinically proven to heal",
            ],
        },
        "fresh_openings": {
            "description": "Every article opens with its own device - no recycled boilerplate intros.",
            # Seed ban list; the orchestrator adds a per-run nonce on retry
            "boilerplate_intros": [
                "Camel milk has garnered increasing attention",
                "Traditionally consumed in various cultures",
                "rich in proteins, vitamins, and minerals, making it a valuable dietary component",
                "This article explores its nutritional profile, potential health benefits",
            ],
        },
    },
    "structure": {
        "paragraphs": 9,
        "faq_count": 8,
        "min_sentences_per_paragraph": 4,
        "max_references": 8,
    },
}

MAX_REFERENCES = GUIDELINES["structure"]["max_references"]


def get_boilerplate_intros() -> list[str]:
    """Phrases the opening paragraph must never contain."""
    return list(GUIDELINES["core_principles"]["fresh_openings"]["boilerplate_intros"])


def get_prohibited_claims() -> list[str]:
    return list(GUIDELINES["core_principles"]["evidence_first"]["prohibited_claims"])


def get_editorial_instructions(lang: str, lead_style: str, paragraphs: int, faq_count: int, min_sentences: int) -> list[str]:
    """Return the editor brief used as the system prompt for article writing."""
    return [
        f"You are a careful scientific editor writing in {lang}.",
        "Goals:",
        f"- Start with a UNIQUE, non-generic introduction using the lead style: {lead_style}. Do NOT reuse boilerplate.",
        "- Use a varied opening device (e.g., a pointed question, surprising data, myth-busting, short historical note, practical scenario, or crisp analogy).",
        f"- Structure: target {paragraphs} paragraphs; EACH paragraph must have at least {min_sentences} sentences (full-stops, not fragments).",
        "- Summarize evidence and mechanisms clearly and neutrally; no medical advice; EU-compliant tone.",
        "- Never claim or imply: " + ", ".join(get_prohibited_claims()) + ".",
        f"- FAQs: include {faq_count} questions/answers (plain text).",
    ]


def get_citation_instructions(mode: str, max_inline: int, allowed: list[str]) -> str:
    """Citation policy sentence for the system prompt."""
    if mode == "none":
        return "Inline citations policy: include ZERO inline PMIDs anywhere in the body or FAQ."
    return (
        f"Inline citations policy: include AT MOST {max_inline} total inline PMIDs in the entire article "
        "(not per paragraph). Never repeat the same PMID, do not add PMIDs in FAQ. "
        f"Use only from this allowed set: [{','.join(allowed)}]."
    )


def get_temperature(task: str, attempt: int = 1) -> float:
    """Return sampling temperature for a task; article retries run a little hotter."""
    temps = {
        "article": 0.45,   # a bit higher for intro diversity
        "article_retry": 0.55,
        "ideas": 0.4,
        "template_plan": 0.7,
    }
    if task == "article" and attempt > 1:
        task = "article_retry"
    return temps.get(task, 0.5)

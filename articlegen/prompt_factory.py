# articlegen/prompt_factory.py
from __future__ import annotations
import json
from typing import Any, Dict, List, Sequence

from articlegen.content_guidelines import (
    get_citation_instructions,
    get_editorial_instructions,
    get_temperature,
)
from articlegen.models import GenerationRequest, ModelCallSpec, ReferenceRecord

# ---------- helpers ----------

def input_blocks(system: str, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    """System brief + user payload, in the Responses API `input` shape."""
    user_json = json.dumps(payload, ensure_ascii=False)
    return [
        {"role": "system", "content": [{"type": "input_text", "text": system}]},
        {"role": "user", "content": [{"type": "input_text", "text": "USER_PAYLOAD_JSON:\n" + user_json}]},
    ]


def _ban_list_text(ban_phrases: Sequence[str]) -> str:
    if not ban_phrases:
        return ""
    return "Avoid these phrases verbatim or near-duplicate paraphrases: • " + " • ".join(ban_phrases) + "."

# ---------- main factories ----------

def make_article_call(
    request: GenerationRequest,
    refs: Sequence[ReferenceRecord],
    allowed: List[str],
    schema: Dict[str, Any],
    model: str,
) -> ModelCallSpec:
    """
    Build the article-writing call. `request` must already be resolved: concrete
    citation mode, lead style, min sentences and max inline citations.
    """
    if request.citation_mode == "auto":
        raise ValueError("citation mode must be resolved before building the call")
    min_sp = request.min_sentences_per_paragraph
    max_inline = request.max_inline_citations

    lines = get_editorial_instructions(
        request.lang, request.lead_style, request.paragraphs, request.faq_count, min_sp
    )
    lines += [
        "- Citations: " + get_citation_instructions(request.citation_mode, max_inline, allowed),
        "- Never fabricate PMIDs or study data. If uncertain, omit the inline citation.",
        _ban_list_text(request.ban_phrases),
        "Constraints:",
        "- Text-only. No images, no tables.",
        f"- Use consistent terminology in {request.lang}.",
        "- If you include PMIDs inline, cite like [PMID:12345678].",
    ]
    system = "\n".join(line for line in lines if line)

    payload = {
        "task": "write_article",
        "language": request.lang,
        "subject": request.subject,
        "keywords": request.keywords,
        "styleFlags": request.style_flags,
        "specialRequirements": request.special_requirements,
        "references": [r.model_dump() for r in refs],
        "controls": {
            "leadStyle": request.lead_style,
            "minSentencesPerParagraph": min_sp,
            "pmidMode": request.citation_mode,
            "maxInlinePmids": max_inline,
            "allowedPmids": allowed,
            "banPhrases": request.ban_phrases,
        },
    }
    return ModelCallSpec(
        model=model,
        input_blocks=input_blocks(system, payload),
        schema_name="article_schema",
        json_schema=schema,
        temperature=request.temperature,
    )


def make_ideas_call(lang: str, seeds: List[str], count: int, topic: str, schema: Dict[str, Any], model: str) -> ModelCallSpec:
    system = (
        f"Generate unique, high-intent SEO ideas in {lang} about {topic}. "
        "Return ONLY JSON matching schema; no duplicates; diverse angles."
    )
    payload = {"task": "seed_ideas", "language": lang, "seed_topics": seeds, "count": count}
    return ModelCallSpec(
        model=model,
        input_blocks=input_blocks(system, payload),
        schema_name="ideas_schema",
        json_schema=schema,
        temperature=get_temperature("ideas"),
    )


def make_template_plan_call(lang: str, seed: str, style_flags: List[str], topic: str, schema: Dict[str, Any], model: str) -> ModelCallSpec:
    system = "\n".join([
        f"You are a web designer planning a lightweight blog template for a site about {topic}.",
        "Return ONLY JSON matching schema: palette, type scale, layout variants and short hero copy.",
        f"- Hero copy and CTA label must be written in {lang}.",
        "- Colors as hex codes with readable contrast between fg/bg and accent/accent_ink.",
        "- prefix: a short lowercase CSS class prefix (letters only).",
        "- Treat the seed as the source of variety; different seeds should give visibly different plans.",
    ])
    payload = {"task": "template_plan", "language": lang, "seed": seed, "styleFlags": style_flags}
    return ModelCallSpec(
        model=model,
        input_blocks=input_blocks(system, payload),
        schema_name="template_plan_schema",
        json_schema=schema,
        temperature=get_temperature("template_plan"),
    )

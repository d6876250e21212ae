# articlegen/template_plan.py
from __future__ import annotations
import logging
import random
from typing import Any, Dict, List, Optional

from articlegen.config import Settings
from articlegen.content_guidelines import SUPPORTED_LANGUAGES, TEMPLATE_STYLE_FLAGS
from articlegen.errors import ValidationError
from articlegen.llm import StructuredClient
from articlegen.prompt_factory import make_template_plan_call
from articlegen.schemas import load_schema

logger = logging.getLogger(__name__)


def make_seed(rng: random.Random) -> str:
    return "seed-" + "".join(str(rng.randrange(10)) for _ in range(10))


def plan_template(
    client: StructuredClient,
    settings: Settings,
    lang: str,
    seed: Optional[str] = None,
    style_flags: Optional[List[str]] = None,
    randomize: bool = False,
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    """Ask the model for a blog design plan. The returned `seed` is always the one we sent."""
    rng = rng or random.Random()
    lang = (lang or "").strip().lower()
    if lang not in SUPPORTED_LANGUAGES:
        raise ValidationError(f"unsupported language '{lang}'")

    seed = (seed or "").strip() or make_seed(rng)
    flags = [f.strip() for f in style_flags or [] if f and f.strip()]
    if randomize and not flags:
        flags = rng.sample(TEMPLATE_STYLE_FLAGS, 2)

    schema = load_schema(settings.schema_dir, "template_plan")
    spec = make_template_plan_call(lang, seed, flags, settings.site_topic, schema, settings.utility_model)
    plan = client.call(spec)
    plan["seed"] = seed
    logger.info("Template plan lang=%s seed=%s flags=%s", lang, seed, flags)
    return plan

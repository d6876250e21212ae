"""Design plan requests."""

import json
import random
import re
from unittest.mock import MagicMock

import pytest

from articlegen.content_guidelines import TEMPLATE_STYLE_FLAGS
from articlegen.errors import ValidationError
from articlegen.template_plan import plan_template


def sent_payload(llm):
    text = llm.call.call_args.args[0].input_blocks[1]["content"][0]["text"]
    return json.loads(text.split("\n", 1)[1])


def test_random_seed_and_flags(settings):
    llm = MagicMock()
    llm.call.return_value = {"name": "Dune", "seed": "model-made-this-up"}

    plan = plan_template(llm, settings, "en", randomize=True, rng=random.Random(1))
    sent = sent_payload(llm)
    assert re.fullmatch(r"seed-\d{10}", sent["seed"])
    assert plan["seed"] == sent["seed"]
    assert len(sent["styleFlags"]) == 2
    assert set(sent["styleFlags"]) <= set(TEMPLATE_STYLE_FLAGS)
    assert llm.call.call_args.args[0].schema_name == "template_plan_schema"


def test_explicit_seed_and_flags_are_kept(settings):
    llm = MagicMock()
    llm.call.return_value = {"name": "Dune"}

    plan = plan_template(llm, settings, "fr", seed="seed-42", style_flags=["boxed", " "], randomize=True)
    assert plan["seed"] == "seed-42"
    assert sent_payload(llm)["styleFlags"] == ["boxed"]


def test_no_flags_without_randomize(settings):
    llm = MagicMock()
    llm.call.return_value = {}
    plan_template(llm, settings, "en")
    assert sent_payload(llm)["styleFlags"] == []


def test_unknown_language(settings):
    with pytest.raises(ValidationError):
        plan_template(MagicMock(), settings, "klingon")

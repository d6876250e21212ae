"""Response extractor strategies and their priority order."""

import pytest

from articlegen.errors import SchemaMismatchError
from articlegen.extract import ResponseExtractor, parse_json_object


def blocks(*texts):
    return {"output": [{"type": "message", "content": [{"type": "output_text", "text": t} for t in texts]}]}


def test_parsed_field_wins_over_text():
    env = {
        "output_text": '{"from": "text"}',
        "output": [{"content": [{"type": "output_text", "parsed": {"from": "parsed"}, "text": "{}"}]}],
    }
    assert ResponseExtractor().extract(env) == {"from": "parsed"}


def test_output_text():
    assert ResponseExtractor().extract({"output_text": '{"a": 1}'}) == {"a": 1}


def test_scans_blocks_in_order():
    env = blocks("thinking...", '{"second": true}', '{"third": true}')
    assert ResponseExtractor().extract(env) == {"second": True}


def test_scans_across_output_items():
    env = {"output": [
        {"type": "reasoning", "content": []},
        {"type": "message", "content": [{"text": '{"x": 1}'}]},
    ]}
    assert ResponseExtractor().extract(env) == {"x": 1}


def test_fenced_json_is_recovered():
    assert parse_json_object('```json\n{"a": [1, 2]}\n```') == {"a": [1, 2]}


def test_arrays_do_not_count():
    assert parse_json_object("[1, 2, 3]") is None
    with pytest.raises(SchemaMismatchError):
        ResponseExtractor().extract({"output_text": "[1, 2, 3]"})


def test_nothing_usable():
    with pytest.raises(SchemaMismatchError):
        ResponseExtractor().extract(blocks("no json here"))


def test_non_dict_envelope():
    with pytest.raises(SchemaMismatchError):
        ResponseExtractor().extract("plain string")


def test_custom_strategy_order():
    env = {"output_text": '{"a": 1}'}
    extractor = ResponseExtractor([lambda e: None, lambda e: {"custom": True}])
    assert extractor.extract(env) == {"custom": True}

import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from text_utils import (
    BIAS_FILTER_RULES,
    extract_json_object,
    filter_content,
    strip_code_fences,
)


@pytest.mark.parametrize("phrase,replacement", BIAS_FILTER_RULES)
def test_each_rule_replaces_its_phrase(phrase, replacement):
    result = filter_content(f"有人说她{phrase}，其实不然。")
    assert phrase not in result.content
    assert replacement in result.content
    assert result.was_modified is True


def test_clean_text_is_untouched():
    text = "妳的直觉敏锐，适合在变化中寻找机会。"
    result = filter_content(text)
    assert result.content == text
    assert result.was_modified is False


def test_empty_text():
    assert filter_content("") == ("", False)
    assert filter_content(None) == ("", False)


def test_every_occurrence_is_replaced():
    result = filter_content("命硬？命硬！")
    assert result.content == "性格坚强独立？性格坚强独立！"


def test_filter_is_idempotent():
    text = "传统说法认为克夫、命硬、一生劳碌，并且运势低迷。"
    once = filter_content(text)
    twice = filter_content(once.content)
    assert twice.content == once.content
    assert twice.was_modified is False
    for phrase, _ in BIAS_FILTER_RULES:
        assert phrase not in once.content


def test_replacement_text_is_literal():
    # no regex group expansion in replacements
    result = filter_content(r"\1克夫\g<0>")
    assert result.content == r"\1婚姻中需要更多沟通理解\g<0>"


def test_strip_code_fences():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'
    assert strip_code_fences("") == ""


def test_extract_json_object_skips_prose():
    text = '好的，以下是解读：{"personality": "温和", "wealth": {"title": "稳"}} 希望对妳有帮助。'
    assert extract_json_object(text) == '{"personality": "温和", "wealth": {"title": "稳"}}'


def test_extract_json_object_ignores_braces_inside_strings():
    text = 'x {"a": "}{", "b": "say \\"}\\""} y'
    assert extract_json_object(text) == '{"a": "}{", "b": "say \\"}\\""}'


def test_extract_json_object_returns_first_object():
    assert extract_json_object('{"a": 1} {"b": 2}') == '{"a": 1}'


def test_extract_json_object_without_object():
    assert extract_json_object("抱歉，我无法回答。") is None
    assert extract_json_object('{"a": 1') is None
    assert extract_json_object("") is None

import pytest

from src.engine.command_parser import parse_command
from src.shared.schema import FieldUpdateOperation, ReplaceOperation


def _dump(parsed):
    return [op.model_dump(by_alias=True) for op in parsed.operations]


def test_single_replace():
    parsed = parse_command('replace "Acme" with "Globex"')
    assert parsed.is_valid is True
    assert _dump(parsed) == [{"type": "replace", "findText": "Acme", "replaceText": "Globex"}]


def test_single_field_update():
    parsed = parse_command('set designation to "Manager"')
    assert parsed.is_valid is True
    assert _dump(parsed) == [{"type": "field_update", "fieldName": "designation", "newValue": "Manager"}]


def test_wire_shape_of_parsed_command():
    data = parse_command('replace "Acme" with "Globex"').model_dump(by_alias=True)
    assert data["originalInput"] == 'replace "Acme" with "Globex"'
    assert data["isValid"] is True


@pytest.mark.parametrize(
    "text",
    [
        "REPLACE 'Acme' WITH 'Globex'",
        "Please Replace \"Acme\" With \"Globex\" today",
        'replace   "  Acme  "   with " Globex "',
    ],
)
def test_replace_is_case_insensitive_and_trimmed(text):
    ops = parse_command(text).operations
    assert len(ops) == 1
    assert ops[0].find_text == "Acme"
    assert ops[0].replace_text == "Globex"


def test_operations_grouped_by_pattern_not_position():
    text = 'and title to "T" then replace "a" with "b" and set author to "X"'
    ops = parse_command(text).operations
    assert [type(op) for op in ops] == [ReplaceOperation, FieldUpdateOperation, FieldUpdateOperation]
    assert ops[0].find_text == "a"
    assert ops[1].field_name == "author"
    assert ops[2].field_name == "title"


def test_chained_field_updates():
    ops = parse_command('set title to "Quarterly Update" and author to "Jane Doe"').operations
    assert [(op.field_name, op.new_value) for op in ops] == [
        ("title", "Quarterly Update"),
        ("author", "Jane Doe"),
    ]


def test_pattern_applies_more_than_once():
    ops = parse_command('replace "a" with "b" and replace "c" with "d"').operations
    assert [(op.find_text, op.replace_text) for op in ops] == [("a", "b"), ("c", "d")]


def test_update_and_change_keywords():
    ops = parse_command("update role to 'Lead' change company to 'Initech'").operations
    assert [(op.field_name, op.new_value) for op in ops] == [("role", "Lead"), ("company", "Initech")]


def test_mismatched_quotes_do_not_match():
    parsed = parse_command("replace \"Acme' with \"Globex\"")
    assert parsed.is_valid is False
    assert parsed.operations == []


def test_keyword_inside_word_is_ignored():
    assert parse_command('the exchange rate to "5"').is_valid is False


@pytest.mark.parametrize("text", ["", None, "make it better", "replace Acme with Globex"])
def test_unparseable_input_is_invalid_not_an_error(text):
    parsed = parse_command(text)
    assert parsed.is_valid is False
    assert parsed.operations == []


def test_empty_replacement_means_no_explicit_replacement():
    ops = parse_command('replace "Acme" with ""').operations
    assert len(ops) == 1
    assert ops[0].find_text == "Acme"
    assert ops[0].replace_text is None


def test_blank_find_text_is_dropped():
    assert parse_command('replace "   " with "Globex"').is_valid is False


def test_value_may_contain_other_quote_character():
    ops = parse_command('set title to "Bob\'s Report"').operations
    assert ops[0].new_value == "Bob's Report"

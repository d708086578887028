import pytest

from tinystache.core.lexer import reconstruct, tokenize
from tinystache.core.model import DEFAULT, IterEnd, IterInit, LiteralToken, SymbolToken


def test_empty_template_has_no_tokens():
    assert tokenize("") == []


def test_plain_text_is_one_literal():
    assert tokenize("just some text\nover two lines") == [LiteralToken("just some text\nover two lines")]


def test_symbols_with_surrounding_whitespace():
    assert tokenize("Hi {{ name }}!") == [LiteralToken("Hi "), SymbolToken("name"), LiteralToken("!")]


def test_identifiers_allow_hyphens_dots_and_digits():
    assert tokenize("{{first-name}}{{a.b}}{{x1}}") == [
        SymbolToken("first-name"),
        SymbolToken("a.b"),
        SymbolToken("x1"),
    ]


def test_identifiers_also_allow_underscores_and_unicode_letters():
    assert tokenize("{{first_name}}{{café}}") == [SymbolToken("first_name"), SymbolToken("café")]


def test_current_item_symbol():
    assert tokenize("{{.}}") == [SymbolToken(".")]


def test_iteration_markers_with_default_separator():
    assert tokenize("{{#items}}{{.}}{{/items}}") == [
        IterInit("items", DEFAULT),
        SymbolToken("."),
        IterEnd("items"),
    ]


def test_iteration_close_allows_whitespace():
    assert tokenize("{{# rows }}{{/ rows }}") == [IterInit("rows", DEFAULT), IterEnd("rows")]


def test_quoted_separator_is_taken_verbatim():
    tokens = tokenize("{{#rows ' | ' }}x{{/rows}}")
    assert tokens[0] == IterInit("rows", " | ")


def test_quoted_separator_may_contain_a_newline():
    assert tokenize("{{#items '\n'}}")[0] == IterInit("items", "\n")


def test_quoted_separator_may_contain_closing_braces():
    assert tokenize("{{#x '}}'}}")[0] == IterInit("x", "}}")


def test_empty_quoted_separator():
    assert tokenize("{{#x ''}}")[0] == IterInit("x", "")


def test_default_and_explicit_separators_are_distinct():
    assert IterInit("x", DEFAULT) != IterInit("x", ",")


def test_unterminated_delimiter_degrades_to_literal():
    assert tokenize("abc {{") == [LiteralToken("abc {{")]


def test_malformed_marker_degrades_to_literal():
    assert tokenize("{{ not valid }}") == [LiteralToken("{{ not valid }}")]


def test_adjacent_literal_text_collapses():
    assert tokenize("{{a b}}{{c d}} tail") == [LiteralToken("{{a b}}{{c d}} tail")]


def test_extra_braces_around_a_symbol():
    assert tokenize("{{{x}}}") == [LiteralToken("{"), SymbolToken("x"), LiteralToken("}")]


def test_tokens_record_their_positions():
    tokens = tokenize("ab{{x}}cd")
    assert [t.position for t in tokens] == [0, 2, 7]
    assert [t.raw for t in tokens] == ["ab", "{{x}}", "cd"]


@pytest.mark.parametrize(
    "template",
    [
        "",
        "plain",
        "Hello {{ name }}, you have {{count}} messages",
        "{{#numbers}}Number:{{.}}{{/numbers}}",
        "{{#items '\n'}}{{.}}{{/items}}",
        "{{#countries}}{{name}}:{{#cities}}{{name}},{{/cities}}{{/countries}}",
        "{{ broken } {{ {{/}} {{#}} }} {",
        "{{{x}}} {{#a ' , '}} x {{/a}} trailing {{",
    ],
)
def test_raw_text_reconstructs_the_template(template):
    assert reconstruct(tokenize(template)) == template

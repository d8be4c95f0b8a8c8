from __future__ import annotations

import sys

import pytest

from miniyaml import (
    Document,
    Mapping,
    ParserSettings,
    Scalar,
    Sequence,
    YamlDuplicateKeyError,
    YamlIndentationError,
    YamlLexicalError,
    YamlNestingError,
    YamlParseError,
    YamlSyntaxError,
    parse,
    pop_error,
)
from miniyaml.diagnostics import NO_ERROR


class TestValidDocuments:
    def test_flat_mapping(self, log):
        doc = parse("name: Alice\nage: 30\n", log=log)

        assert isinstance(doc, Document)
        assert isinstance(doc.root, Mapping)
        assert list(doc.root.keys()) == ["name", "age"]
        assert doc.root["name"] == Scalar("Alice")
        assert doc.root["age"] == Scalar("30")
        assert doc.lookup("name") == Scalar("Alice")

    def test_sequence_under_key(self, log):
        doc = parse("items:\n  - one\n  - two\n", log=log)

        items = doc.lookup("items")
        assert isinstance(items, Sequence)
        assert [item.text for item in items] == ["one", "two"]

    def test_nested_mapping(self, log):
        doc = parse("a:\n  b: 1\n", log=log)

        assert doc.lookup("a.b") == Scalar("1")

    def test_insertion_order_is_preserved(self, log):
        doc = parse("zeta: 1\nalpha: 2\nmid: 3\n", log=log)

        assert list(doc.root) == ["zeta", "alpha", "mid"]

    def test_quoted_values(self, log):
        doc = parse('greeting: "hello, world"\nquote: "say \\"hi\\""\n', log=log)

        assert doc.lookup("greeting").text == "hello, world"
        assert doc.lookup("quote").text == 'say "hi"'

    def test_deep_nesting_and_return_to_outer_levels(self, log):
        source = (
            "server:\n"
            "  http:\n"
            "    port: 8080\n"
            "    hosts:\n"
            "      - a\n"
            "      - b\n"
            "  debug: yes\n"
            "name: app\n"
        )
        doc = parse(source, log=log)

        assert doc.to_python() == {
            "server": {
                "http": {"port": "8080", "hosts": ["a", "b"]},
                "debug": "yes",
            },
            "name": "app",
        }

    def test_sequence_at_root(self, log):
        doc = parse("- a\n- b\n", log=log)

        assert isinstance(doc.root, Sequence)
        assert doc.to_python() == ["a", "b"]

    def test_sequence_of_mappings(self, log):
        source = "- name: web\n  port: 80\n- name: db\n"
        doc = parse(source, log=log)

        assert doc.to_python() == [{"name": "web", "port": "80"}, {"name": "db"}]

    def test_nested_block_under_dash(self, log):
        source = "-\n  key: value\n- plain\n"
        doc = parse(source, log=log)

        assert doc.to_python() == [{"key": "value"}, "plain"]

    def test_nested_sequence_on_dash_line(self, log):
        doc = parse("- - a\n  - b\n- c\n", log=log)

        assert doc.to_python() == [["a", "b"], "c"]

    def test_compact_sequence_at_key_column(self, log):
        doc = parse("items:\n- a\n- b\nname: x\n", log=log)

        assert doc.to_python() == {"items": ["a", "b"], "name": "x"}

    def test_empty_values(self, log):
        doc = parse("a:\nb: 1\nc:\n", log=log)

        assert doc.to_python() == {"a": "", "b": "1", "c": ""}

    def test_blank_and_whitespace_lines_are_ignored(self, log):
        doc = parse("a:\n\n   \n  b: 1\n\nc: 2\n", log=log)

        assert doc.to_python() == {"a": {"b": "1"}, "c": "2"}

    def test_tabs_indent_like_spaces(self, log):
        doc = parse("a:\n\tb: 1\n\tc: 2\n", log=log)

        assert doc.to_python() == {"a": {"b": "1", "c": "2"}}

    def test_whitespace_only_source_is_empty_mapping(self, log):
        doc = parse("   \n\n", log=log)

        assert doc.root == Mapping()
        assert doc.to_python() == {}

    def test_indented_root_block(self, log):
        doc = parse("  a: 1\n  b: 2\n", log=log)

        assert doc.to_python() == {"a": "1", "b": "2"}

    def test_node_lines(self, log):
        doc = parse("a: 1\nlist:\n  - x\n", log=log)

        assert doc.root.line == 1
        assert doc.lookup("a").line == 1
        assert doc.lookup("list").line == 3
        assert doc.lookup("list.0").line == 3

    def test_successful_parse_leaves_log_untouched(self, log):
        parse("a: 1\n", log=log)

        assert log.pop() == NO_ERROR


class TestSources:
    def test_length_truncates_memory_source(self, log):
        doc = parse("a: 1\nb: 2\n", 4, log=log)

        assert doc.to_python() == {"a": "1"}

    def test_bytes_source(self, log):
        doc = parse("name: \"Zoë\"\n".encode("utf-8"), log=log)

        assert doc.lookup("name").text == "Zoë"

    def test_path_is_reported_for_memory_sources(self, log):
        with pytest.raises(YamlParseError) as exc_info:
            parse("a b", path="inline.yaml", log=log)

        assert exc_info.value.path == "inline.yaml"
        assert str(exc_info.value).startswith("File: inline.yaml | Line 1:3")


class TestErrors:
    def test_duplicate_key(self, log):
        with pytest.raises(YamlDuplicateKeyError) as exc_info:
            parse("a: 1\na: 2\n", log=log)

        error = exc_info.value
        assert error.key == "a"
        assert error.line == 2
        assert error.first_line == 1
        assert error.code == "DUPLICATE_KEY"
        assert "Duplicate key 'a'" in log.pop()

    def test_duplicate_key_in_nested_mapping(self, log):
        with pytest.raises(YamlDuplicateKeyError):
            parse("outer:\n  x: 1\n  x: 2\n", log=log)

    def test_same_key_in_different_mappings_is_fine(self, log):
        doc = parse("a:\n  x: 1\nb:\n  x: 2\n", log=log)

        assert doc.lookup("b.x").text == "2"

    def test_unterminated_string(self, log):
        with pytest.raises(YamlLexicalError) as exc_info:
            parse('k: "abc\n', log=log)

        assert exc_info.value.code == "UNTERMINATED_STRING"
        assert len(log) == 1
        assert "Unterminated string" in log.pop()

    @pytest.mark.parametrize(
        "source, code",
        [
            ('key: abc"def"', "INVALID_SYMBOL"),
            ("key: $HOME", "UNRECOGNIZED_TOKEN"),
            ("# comment\n", "UNRECOGNIZED_TOKEN"),
            ("key: [a, b]", "UNRECOGNIZED_TOKEN"),
        ],
    )
    def test_lexical_errors_abort_parse(self, log, source: str, code: str) -> None:
        with pytest.raises(YamlLexicalError) as exc_info:
            parse(source, log=log)

        assert exc_info.value.code == code

    def test_missing_colon_on_same_line(self, log):
        with pytest.raises(YamlSyntaxError) as exc_info:
            parse("key value\n", log=log)

        error = exc_info.value
        assert error.code == "MISSING_COLON"
        assert error.found == "symbol 'value'"
        assert error.suggestion

    def test_missing_colon_at_end_of_line(self, log):
        with pytest.raises(YamlSyntaxError) as exc_info:
            parse("key\nother: 1\n", log=log)

        assert exc_info.value.code == "MISSING_COLON"
        assert exc_info.value.line == 2

    def test_undent_to_unknown_level(self, log):
        with pytest.raises(YamlIndentationError) as exc_info:
            parse("a:\n    b: 1\n  c: 2\n", log=log)

        error = exc_info.value
        assert error.message == "Indentation does not match any enclosing level"
        assert error.found_indent == 2
        assert error.line == 3
        assert "INDENTATION_ERROR" in log.pop()

    def test_unexpected_indent_after_scalar(self, log):
        with pytest.raises(YamlIndentationError) as exc_info:
            parse("a: 1\n  b: 2\n", log=log)

        error = exc_info.value
        assert error.message == "Unexpected indentation"
        assert error.expected_indent == 0
        assert error.found_indent == 2

    def test_shallower_line_after_indented_root(self, log):
        with pytest.raises(YamlIndentationError):
            parse("  a: 1\nb: 2\n", log=log)

    def test_sequence_item_inside_mapping(self, log):
        with pytest.raises(YamlSyntaxError, match="Sequence item found inside a mapping"):
            parse("a: 1\n- b\n", log=log)

    def test_key_inside_sequence(self, log):
        with pytest.raises(YamlSyntaxError, match="Mapping key found inside a sequence"):
            parse("- a\nb: 1\n", log=log)

    def test_inline_nested_mapping_is_rejected(self, log):
        with pytest.raises(YamlSyntaxError, match="Nested mapping must start on a new line"):
            parse("a: b: c\n", log=log)

    def test_dash_on_key_line_is_rejected(self, log):
        with pytest.raises(YamlSyntaxError, match="cannot start on the same line"):
            parse("a: - b\n", log=log)

    def test_trailing_token_after_value(self, log):
        with pytest.raises(YamlSyntaxError, match="Unexpected token after value"):
            parse('a: b "c"\n', log=log)

    def test_quoted_key_is_rejected(self, log):
        with pytest.raises(YamlSyntaxError, match="Expected a mapping key"):
            parse('"a": 1\n', log=log)

    def test_failure_goes_to_default_log_when_none_given(self):
        with pytest.raises(YamlDuplicateKeyError):
            parse("a: 1\na: 2\n")

        assert "Duplicate key" in pop_error()
        assert pop_error() == NO_ERROR


class TestNestingLimit:
    SOURCE = "a:\n  b:\n    c: 1\n"

    def test_within_limit(self, log):
        doc = parse(self.SOURCE, log=log, settings=ParserSettings(max_depth=3))

        assert doc.lookup("a.b.c").text == "1"

    def test_beyond_limit(self, log):
        with pytest.raises(YamlNestingError) as exc_info:
            parse(self.SOURCE, log=log, settings=ParserSettings(max_depth=2))

        assert exc_info.value.max_depth == 2
        assert exc_info.value.code == "NESTING_TOO_DEEP"
        assert "Nesting too deep" in log.pop()

    def test_default_limit_stops_adversarial_input(self, log):
        source = "".join(f"{' ' * level}k{level}:\n" for level in range(200))

        with pytest.raises(YamlNestingError):
            parse(source, log=log)

    def test_raised_limit_beyond_interpreter_stack(self, log):
        levels = sys.getrecursionlimit()
        source = "".join(f"{' ' * level}k{level}:\n" for level in range(levels))
        settings = ParserSettings(max_depth=levels * 2)

        with pytest.raises(YamlNestingError) as exc_info:
            parse(source, log=log, settings=settings)

        assert exc_info.value.code == "NESTING_TOO_DEEP"
        assert exc_info.value.max_depth == levels * 2
        assert isinstance(exc_info.value.__cause__, RecursionError)
        assert len(log) == 1
        assert "recursion limit" in log.pop()

        assert parse("a:\n  b: 1\n", log=log, settings=settings).lookup("a.b").text == "1"


class TestIdempotence:
    def test_same_source_yields_equal_documents(self, log):
        source = "a:\n  - x\n  - y: 1\n    z: 2\nb: \"q\"\n"

        first = parse(source, log=log)
        second = parse(source, log=log)

        assert first == second
        assert first is not second
        assert first.root is not second.root

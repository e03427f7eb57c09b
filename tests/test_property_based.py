from __future__ import annotations

import string

from hypothesis import given
from hypothesis import strategies as st

from perchance_lint.boundary import find_markup_boundary
from perchance_lint.classifier import count_indent_level, get_indent_info
from perchance_lint.extractor import extract_definitions, extract_references
from perchance_lint.rules import run_diagnostics
from perchance_lint.structure import format_lines

name_strategy = st.from_regex(r"[A-Za-z_][A-Za-z0-9_-]{0,12}", fullmatch=True)
filler_strategy = st.text(alphabet=string.ascii_letters + string.digits + " .,!?", max_size=20)
indent_strategy = st.text(alphabet=" \t", max_size=6)
content_strategy = st.one_of(
    name_strategy,
    name_strategy.map(lambda name: f"{name} = value"),
    name_strategy.map(lambda name: f"${name} = value"),
    name_strategy.map(lambda name: f"{name}(x) =>"),
    name_strategy.map(lambda name: f"a [[{name}]] b"),
    st.sampled_from(["", "// note", "<div>", "</div>", "two words", "[x = 1 ? a : b]"]),
)
line_strategy = st.builds(
    lambda indent, content, trailing: indent + content + trailing,
    indent_strategy,
    content_strategy,
    st.text(alphabet=" \t", max_size=3),
)
document_strategy = st.lists(line_strategy, max_size=25)


@given(st.integers(min_value=0, max_value=8), st.integers(min_value=0, max_value=17))
def test_indent_level_counts_tabs_and_space_pairs(tabs: int, spaces: int):
    assert count_indent_level("\t" * tabs + " " * spaces) == tabs + spaces // 2


@given(indent_strategy)
def test_indent_level_ignores_order_of_whitespace(indent: str):
    expected = indent.count("\t") + indent.count(" ") // 2
    assert count_indent_level(indent) == expected


@given(filler_strategy, name_strategy, filler_strategy)
def test_references_report_exact_span(prefix: str, name: str, suffix: str):
    line = f"{prefix}[[{name}]]{suffix}"

    references = extract_references(["", line])

    assert len(references) == 1
    reference = references[0]
    assert reference.name == name
    assert reference.line == 1
    assert line[reference.start_col : reference.end_col] == f"[[{name}]]"


@given(document_strategy)
def test_definitions_are_top_level_and_before_markup(lines: list[str]):
    boundary = find_markup_boundary(lines)

    for name, index in extract_definitions(lines).items():
        assert index < boundary
        assert not name.startswith("$")
        assert get_indent_info(lines[index]).raw == ""


@given(document_strategy)
def test_unknown_references_are_never_defined(lines: list[str]):
    definitions = extract_definitions(lines)
    for finding in run_diagnostics(lines):
        if finding.code.value == "unknown-reference":
            assert finding.message.rsplit(": ", 1)[1] not in definitions


@given(document_strategy, st.integers(min_value=1, max_value=4))
def test_format_lines_is_idempotent(lines: list[str], indent_size: int):
    formatted = format_lines(lines, indent_size=indent_size)

    assert len(formatted) == len(lines)
    assert format_lines(formatted, indent_size=indent_size) == formatted


@given(document_strategy)
def test_format_lines_keeps_markup_region(lines: list[str]):
    boundary = find_markup_boundary(lines)
    assert format_lines(lines)[boundary:] == lines[boundary:]


@given(document_strategy, st.integers(min_value=1, max_value=4))
def test_format_lines_never_changes_definitions(lines: list[str], indent_size: int):
    formatted = format_lines(lines, indent_size=indent_size)

    assert extract_definitions(formatted) == extract_definitions(lines)

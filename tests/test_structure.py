from __future__ import annotations

from perchance_lint.extractor import extract_definitions
from perchance_lint.models import ListContext
from perchance_lint.structure import find_list_context, folding_ranges, format_lines


def test_find_list_context_returns_current_and_parent():
    lines = ["character", "  name", "    Ada Lovelace", "  age = 36"]
    assert find_list_context(lines, 2) == ListContext(current="name", parent="character")


def test_find_list_context_ignores_shorthand_declarations():
    lines = ["settings", "  title = Zoo", "  welcome to the zoo"]
    assert find_list_context(lines, 2) == ListContext(current="settings", parent=None)


def test_find_list_context_includes_function_headers():
    lines = ["tools", "  async helper(x) =>", "    return x + 1"]
    assert find_list_context(lines, 2) == ListContext(current="helper", parent="tools")


def test_find_list_context_out_of_range():
    assert find_list_context(["animal"], 5) == ListContext()
    assert find_list_context([], 0) == ListContext()


def test_folding_ranges_span_each_top_level_list():
    lines = [
        "animal",
        "  cat",
        "  dog",
        "",
        "color = red",
        "// comment",
        "noun",
        "  x",
        "",
        "<div>",
        "</div>",
    ]
    assert folding_ranges(lines) == [(0, 3), (4, 5), (6, 8)]


def test_folding_ranges_skip_single_line_lists():
    assert folding_ranges(["a", "b", "c"]) == []


def test_format_lines_normalizes_list_blocks_only():
    lines = [
        "animal",
        "\tcat  ",
        "   dog",
        "greet() =>",
        "\t\treturn 1",
        "plain",
        "  stays",
        "",
        "<div>",
        "\t<p>x</p>  ",
    ]

    assert format_lines(lines, indent_size=4) == [
        "animal",
        "    cat",
        "    dog",
        "greet() =>",
        "\t\treturn 1",
        "plain",
        "    stays",
        "",
        "<div>",
        "\t<p>x</p>  ",
    ]


def test_format_lines_keeps_nesting_depth():
    lines = ["character", "\tname", "\t\tAda"]
    assert format_lines(lines) == ["character", "  name", "    Ada"]


def test_format_lines_respects_toggles():
    lines = ["animal", "\tcat  "]
    assert format_lines(lines, trim_trailing=False, normalize_indent=False) == lines
    assert format_lines(lines, normalize_indent=False) == ["animal", "\tcat"]


def test_format_lines_keeps_single_space_items_inside_their_list():
    lines = ["animal", " cat", "  dog"]

    formatted = format_lines(lines)

    assert formatted == ["animal", "  cat", "  dog"]
    assert extract_definitions(formatted) == {"animal": 0}


def test_format_lines_leaves_function_bodies_untouched():
    lines = ["pick() =>", "\tdone  ", "\t\treturn 1", "", "\tif (x) {", "animal", "\tcat"]

    assert format_lines(lines) == [
        "pick() =>",
        "\tdone  ",
        "\t\treturn 1",
        "",
        "\tif (x) {",
        "animal",
        "  cat",
    ]


def test_format_lines_leaves_nested_function_bodies_untouched():
    lines = ["tools", "\thelper() =>", "\t\tdone", "\t\t\treturn 1", "\tname"]

    assert format_lines(lines) == ["tools", "\thelper() =>", "\t\tdone", "\t\t\treturn 1", "  name"]

from textwrap import dedent

from jinklsp.definition import find_definition
from jinklsp.ls_types import Location, Position, Range

MAIN_URI = "file:///ws/src/main.jk"
MATHLIB_URI = "file:///ws/src/mathlib.jk"
IO_URI = "file:///ws/src/std/io.jk"


def definition(index, text, line, character, uri=MAIN_URI):
    text = dedent(text)
    index.update(uri, text)
    return find_definition(uri, text, Position(line, character), index)


def test_local_symbol(index):
    locations = definition(index, "let x = 5;\nlet y = x;\n", 1, 8)

    assert locations == [Location(MAIN_URI, Range.create(0, 4, 0, 5))]


def test_cursor_right_after_word(index):
    locations = definition(index, "let x = 5;\nlet y = x;\n", 1, 9)

    assert locations == [Location(MAIN_URI, Range.create(0, 4, 0, 5))]


def test_import_module_path_jumps_to_module(mathlib):
    locations = definition(mathlib, "import from mathlib { sqrt };\n", 0, 14)

    assert locations == [Location(MATHLIB_URI, Range.zero())]


def test_selectively_imported_name(mathlib):
    locations = definition(mathlib, "import from mathlib { sqrt };\nlet r = sqrt(1);\n", 1, 9)

    assert locations == [Location(MATHLIB_URI, Range.create(0, 8, 0, 12))]


def test_aliased_import_resolves_original_name(mathlib):
    locations = definition(mathlib, "import from mathlib { sqrt as root };\nlet r = root(1);\n", 1, 9)

    assert locations == [Location(MATHLIB_URI, Range.create(0, 8, 0, 12))]


def test_selective_import_does_not_check_visibility(mathlib):
    locations = definition(mathlib, "import from mathlib { helper };\nhelper();\n", 1, 2)

    assert locations == [Location(MATHLIB_URI, Range.create(1, 4, 1, 10))]


def test_wildcard_import_exposes_public_symbols_only(mathlib):
    text = "import mathlib.*;\nsqrt(1);\nhelper();\n"

    assert definition(mathlib, text, 1, 1) == [Location(MATHLIB_URI, Range.create(0, 8, 0, 12))]
    assert definition(mathlib, text, 2, 1) == []


def test_qualified_access_through_module_import(index):
    index.update(IO_URI, "pub fun print(string s) {}\n")

    locations = definition(index, "import std.io;\nio.print(1);\n", 1, 4)

    assert locations == [Location(IO_URI, Range.create(0, 8, 0, 13))]


def test_qualified_access_through_alias(index):
    index.update(IO_URI, "pub fun print(string s) {}\n")

    locations = definition(index, "import std.io as out;\nout.print(1);\n", 1, 5)

    assert locations == [Location(IO_URI, Range.create(0, 8, 0, 13))]


def test_alias_jumps_to_import_statement(index):
    index.update(IO_URI, "pub fun print(string s) {}\n")

    locations = definition(index, "import std.io as sio;\nsio.print(1);\n", 1, 1)

    assert locations == [Location(MAIN_URI, Range.create(0, 0, 0, 21))]


def test_nothing_under_cursor(index):
    assert definition(index, "let x = 1;\n\n", 1, 0) == []
    assert definition(index, "let x = unknown;\n", 0, 10) == []

from jinklsp.jink_index import SymbolIndex
from jinklsp.ls_types import SymbolKind

MAIN = "file:///ws/src/main.jk"
OTHER = "file:///ws/src/other.jk"


def test_update_indexes_symbols_and_imports(index: SymbolIndex):
    index.update(MAIN, "import std.io;\nlet x = 5;\npub fun run() {}\n")

    symbols = index.get_symbols_in(MAIN)
    assert [(s.name, s.kind, s.is_public) for s in symbols] == [
        ("x", SymbolKind.VARIABLE, False),
        ("run", SymbolKind.FUNCTION, True),
    ]
    assert [imp.module_path for imp in index.get_imports(MAIN)] == ["std.io"]
    assert index.get_known_documents() == [MAIN]


def test_update_is_idempotent(index: SymbolIndex):
    text = "let x = 5;\nconst int y = 2;\n"
    index.update(MAIN, text)
    first = index.get_symbols_in(MAIN)

    index.update(MAIN, text)

    assert index.get_symbols_in(MAIN) == first
    assert len(index.get_definition("x")) == 1
    assert index.get_stats()["symbols"] == 2


def test_update_replaces_previous_content(index: SymbolIndex):
    index.update(MAIN, "let old = 1;")
    index.update(MAIN, "let new = 2;")

    assert index.get_definition("old") == []
    assert [s.name for s in index.get_symbols_in(MAIN)] == ["new"]


def test_remove_leaves_no_trace(index: SymbolIndex):
    index.update(MAIN, "import other;\nlet shared = 1;\nlet mine = 2;\n")
    index.update(OTHER, "pub let shared = 3;\n")

    index.remove(MAIN)

    assert index.get_symbols_in(MAIN) == []
    assert index.get_imports(MAIN) == []
    assert index.get_definition("mine") == []
    assert [s.uri for s in index.get_definition("shared")] == [OTHER]
    assert MAIN not in index.get_known_documents()
    assert all(s.uri != MAIN for s in index.get_all_symbols())


def test_remove_unknown_document_is_noop(index: SymbolIndex):
    index.update(MAIN, "let x = 1;")

    index.remove("file:///ws/src/missing.jk")

    assert index.get_stats()["documents"] == 1


def test_get_definition_spans_documents(index: SymbolIndex):
    index.update(MAIN, "let value = 1;")
    index.update(OTHER, "pub const value = 2;")

    assert {s.uri for s in index.get_definition("value")} == {MAIN, OTHER}


def test_resolve_module_and_public_symbol(index: SymbolIndex):
    index.update(OTHER, "pub fun visible() {}\nfun hidden() {}\n")

    assert index.resolve_module("other") == OTHER
    assert index.resolve_module("missing") is None
    assert index.get_public_symbol(OTHER, "visible").name == "visible"
    assert index.get_public_symbol(OTHER, "hidden") is None


def test_document_without_symbols_is_known(index: SymbolIndex):
    index.update(OTHER, "// nothing here\n")

    assert index.get_known_documents() == [OTHER]
    assert index.resolve_module("other") == OTHER


def test_stats_and_clear(index: SymbolIndex):
    index.update(MAIN, "import other;\nlet x = 1;\npub let y = 2;\n")
    index.update(OTHER, "pub let y = 3;\n")

    assert index.get_stats() == {
        "documents": 2,
        "symbols": 3,
        "public_symbols": 2,
        "imports": 1,
        "unique_names": 2,
    }

    index.clear()

    assert index.get_stats()["documents"] == 0
    assert index.get_all_symbols() == []

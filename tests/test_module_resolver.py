import pytest

from jinklsp.module_resolver import document_matches_module, document_module_path, module_suffix, resolve_module


def test_module_suffix():
    assert module_suffix("jink.ext.libc") == "jink/ext/libc.jk"
    assert module_suffix("main") == "main.jk"


def test_resolve_module_by_path_suffix():
    documents = ["file:///ws/src/main.jk", "file:///ws/src/jink/ext/libc.jk"]

    assert resolve_module("jink.ext.libc", documents) == "file:///ws/src/jink/ext/libc.jk"
    assert resolve_module("ext.libc", documents) == "file:///ws/src/jink/ext/libc.jk"
    assert resolve_module("other", documents) is None


def test_resolve_module_first_match_in_scan_order_wins():
    documents = ["file:///a/src/util.jk", "file:///b/src/util.jk"]

    assert resolve_module("util", documents) == "file:///a/src/util.jk"
    assert resolve_module("util", list(reversed(documents))) == "file:///b/src/util.jk"


def test_resolve_module_accepts_windows_paths():
    assert resolve_module("pkg.mod", ["C:\\ws\\src\\pkg\\mod.jk"]) == "C:\\ws\\src\\pkg\\mod.jk"


def test_suffix_match_is_not_segment_aware():
    # "mylib.jk" ends with "lib.jk"
    assert document_matches_module("file:///ws/src/mylib.jk", "lib")


@pytest.mark.parametrize(
    "document, expected",
    [
        ("file:///ws/src/jink/ext/libc.jk", "jink.ext.libc"),
        ("file:///ws/src/main.jk", "main"),
        ("C:\\ws\\src\\a\\b.jk", "a.b"),
        ("file:///ws/src/my%20dir/mod.jk", "my dir.mod"),
        ("file:///ws/lib/main.jk", None),
        ("file:///ws/src/readme.md", None),
        ("file:///ws/src", None),
    ],
)
def test_document_module_path(document, expected):
    assert document_module_path(document) == expected


def test_document_module_path_custom_roots():
    assert document_module_path("file:///ws/lib/util/io.jk", ["lib"]) == "util.io"

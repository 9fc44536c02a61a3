from textwrap import dedent

import pytest

from jinklsp.jink_index import SymbolIndex

MAIN_URI = "file:///ws/src/main.jk"
MATHLIB_URI = "file:///ws/src/mathlib.jk"


@pytest.fixture
def index() -> SymbolIndex:
    return SymbolIndex()


@pytest.fixture
def mathlib(index: SymbolIndex) -> SymbolIndex:
    """Index containing a 'mathlib' module with one public and one private function."""
    index.update(
        MATHLIB_URI,
        "pub fun sqrt(float x) { return x; }\n"
        "fun helper() { return 1; }\n"
        "pub const float PI = 3.14;\n",
    )
    return index


@pytest.fixture
def make_workspace(tmp_path):
    """Write a dict of relative path -> source text below tmp_path and return the root."""

    def _make(files: dict[str, str]):
        for relative_path, content in files.items():
            path = tmp_path / relative_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(dedent(content), encoding="utf-8")
        return tmp_path

    return _make

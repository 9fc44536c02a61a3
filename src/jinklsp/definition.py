"""
Go-to-definition for Jink documents.
"""

import logging
import re

from jinklsp.jink_index import SymbolIndex
from jinklsp.ls_types import JinkImport, Location, Position, Range
from jinklsp.ls_utils import TextUtils

log = logging.getLogger(__name__)

_IMPORT_PATH_PATTERN = re.compile(r"^import\s+(?:from\s+)?([a-zA-Z0-9_.]+)")


def _import_for_qualifier(imports: list[JinkImport], qualifier: str) -> JinkImport | None:
    """Find the import that makes "qualifier.name" refer into a module."""
    for imp in imports:
        if imp.alias == qualifier:
            return imp
        if not imp.alias and (imp.module_path == qualifier or imp.module_path.endswith("." + qualifier)):
            return imp
    return None


def find_definition(uri: str, text: str, position: Position, index: SymbolIndex) -> list[Location]:
    """
    Resolve the symbol at a position to its declaration.

    Tried in order: the module path of an import statement, a symbol of the current document,
    a selectively imported name, a name exposed by a wildcard import, a qualified "module.name"
    access, and finally the alias or default name of an import.

    :return: a list with at most one location; empty if nothing was found
    """
    line = TextUtils.get_line(text, position.line)
    character = position.character

    import_match = _IMPORT_PATH_PATTERN.match(line)
    if import_match and import_match.start(1) <= character <= import_match.end(1):
        module_uri = index.resolve_module(import_match.group(1))
        if module_uri:
            return [Location(module_uri, Range.zero())]

    span = TextUtils.word_span_at(line, character)
    if span is None:
        return []
    word_start, word = span

    for symbol in index.get_symbols_in(uri):
        if symbol.name == word:
            return [Location(symbol.uri, symbol.range)]

    imports = index.get_imports(uri)
    for imp in imports:
        named = next((imported for imported in imp.names if imported.local_name == word), None)
        if named is not None:
            module_uri = index.resolve_module(imp.module_path)
            if module_uri:
                target = next((s for s in index.get_symbols_in(module_uri) if s.name == named.name), None)
                if target:
                    return [Location(target.uri, target.range)]

        if imp.is_wildcard:
            module_uri = index.resolve_module(imp.module_path)
            if module_uri:
                target = index.get_public_symbol(module_uri, word)
                if target:
                    return [Location(target.uri, target.range)]

    if word_start > 0 and line[word_start - 1] == ".":
        qualifier = TextUtils.word_at(line, word_start - 2)
        if qualifier:
            module_import = _import_for_qualifier(imports, qualifier)
            if module_import:
                module_uri = index.resolve_module(module_import.module_path)
                if module_uri:
                    target = index.get_public_symbol(module_uri, word)
                    if target:
                        return [Location(target.uri, target.range)]

    for imp in imports:
        if imp.alias == word or (not imp.alias and imp.default_name == word):
            return [Location(uri, imp.range)]

    log.debug(f"No definition found for '{word}' at {uri}:{position.line}:{character}")
    return []

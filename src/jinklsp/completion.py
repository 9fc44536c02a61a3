"""
Completion proposals: names declared in the current document, plus public symbols of other
documents that are not yet visible, offered together with an auto-import edit.
"""

import logging
import re
from collections.abc import Iterable

from jinklsp.jink_index import SymbolIndex
from jinklsp.jink_language import KEYWORDS
from jinklsp.ls_types import CompletionItem, CompletionItemKind, JinkSymbol, Position, Range, SymbolKind, TextEdit
from jinklsp.ls_utils import TextUtils
from jinklsp.module_resolver import document_matches_module, document_module_path

log = logging.getLogger(__name__)

_ID = r"[a-zA-Z_][a-zA-Z0-9_]*"

# Declarations proposed from the current document, tried in order per line
_LOCAL_DECLARATION_PATTERNS: tuple[tuple[re.Pattern[str], CompletionItemKind], ...] = (
    (re.compile(rf"^(?:pub\s+)?let\s+({_ID})\s*="), CompletionItemKind.VARIABLE),
    (re.compile(rf"^(?:pub\s+)?const\s+({_ID})\s*="), CompletionItemKind.CONSTANT),
    (re.compile(rf"^(?:pub\s+)?const\s+{_ID}\s+({_ID})\s*="), CompletionItemKind.CONSTANT),
    (re.compile(rf"^(?:pub\s+)?type\s+({_ID})\s*=\s*\{{"), CompletionItemKind.STRUCT),
    (re.compile(rf"^(?:pub\s+)?type\s+({_ID})\s*="), CompletionItemKind.TYPE_PARAMETER),
    (re.compile(rf"^(?:pub\s+)?fun\s+({_ID})\s*\("), CompletionItemKind.FUNCTION),
    (re.compile(rf'^(?:pub\s+)?extern\s*\("[^"]*"\)\s+({_ID})\s*\('), CompletionItemKind.FUNCTION),
    (re.compile(rf"^(?:pub\s+)?cls\s+({_ID})\s*(?:\(.*\))?\s*="), CompletionItemKind.CLASS),
)
_TYPED_VAR_PATTERN = re.compile(rf"^({_ID})\s+({_ID})\s*(?:;|=)")

_KIND_BY_SYMBOL_KIND = {
    SymbolKind.FUNCTION: CompletionItemKind.FUNCTION,
    SymbolKind.EXTERN_FUNCTION: CompletionItemKind.FUNCTION,
    SymbolKind.CLASS: CompletionItemKind.CLASS,
    SymbolKind.STRUCT: CompletionItemKind.STRUCT,
    SymbolKind.TYPE_ALIAS: CompletionItemKind.TYPE_PARAMETER,
    SymbolKind.CONSTANT: CompletionItemKind.CONSTANT,
}


def document_declarations(text: str) -> list[CompletionItem]:
    """
    Re-derive the declared names of a document directly from its text.

    This does not consult the index, so it stays correct while the index lags behind edits.
    """
    items: list[CompletionItem] = []
    for raw_line in TextUtils.split_lines(text):
        line = raw_line.strip()
        for pattern, kind in _LOCAL_DECLARATION_PATTERNS:
            match = pattern.match(line)
            if match:
                items.append(CompletionItem(label=match.group(1), kind=kind))
                break
        else:
            match = _TYPED_VAR_PATTERN.match(line)
            if match and match.group(1) not in KEYWORDS:
                items.append(CompletionItem(label=match.group(2), kind=CompletionItemKind.VARIABLE))
    return items


def _is_visible(symbol: JinkSymbol, uri: str, index: SymbolIndex) -> bool:
    """Whether a symbol of another document is already reachable through the document's imports."""
    for imp in index.get_imports(uri):
        if any(imported.local_name == symbol.name for imported in imp.names):
            return True
        if imp.is_wildcard and document_matches_module(symbol.uri.lower(), imp.module_path.lower()):
            return True
    return False


def _auto_import_item(symbol: JinkSymbol, module_path: str) -> CompletionItem:
    return CompletionItem(
        label=symbol.name,
        kind=_KIND_BY_SYMBOL_KIND.get(symbol.kind, CompletionItemKind.VARIABLE),
        detail=f"Auto-import from {module_path}",
        additional_text_edits=[TextEdit(range=Range.zero(), new_text=f"import from {module_path} {{ {symbol.name} }};\n")],
    )


def get_completions(
    uri: str,
    text: str,
    position: Position,
    index: SymbolIndex,
    source_roots: Iterable[str] = ("src",),
) -> list[CompletionItem]:
    """
    Compute completion items at a position.

    :param uri: the document being edited
    :param text: current text of the document
    :param position: cursor position
    :param index: workspace index
    :param source_roots: directory names below which module paths start
    :return: local declarations matching the typed prefix, followed by auto-import proposals
    """
    line = TextUtils.get_line(text, position.line)
    prefix = re.split(r"\s+", line[: position.character])[-1]

    items: list[CompletionItem] = []
    labels: set[str] = set()
    for item in document_declarations(text):
        if item.label.lower().startswith(prefix.lower()) and item.label not in labels:
            items.append(item)
            labels.add(item.label)

    current_uri = uri.lower()
    for symbol in index.get_all_symbols():
        if symbol.uri.lower() == current_uri or not symbol.is_public:
            continue
        if symbol.name in labels or _is_visible(symbol, uri, index):
            continue
        module_path = document_module_path(symbol.uri, source_roots)
        if not module_path:
            continue
        items.append(_auto_import_item(symbol, module_path))
        labels.add(symbol.name)

    log.debug(f"Completion at {uri}:{position.line}:{position.character} (prefix '{prefix}'): {len(items)} items")
    return items

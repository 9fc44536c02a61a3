"""
In-memory workspace index of Jink symbols and imports.
Keeps a by-document and a by-name view of the symbols in lockstep, with thread safety.
"""

import logging
import threading

from jinklsp.jink_parser import JinkParser
from jinklsp.ls_types import JinkImport, JinkSymbol
from jinklsp.module_resolver import resolve_module

log = logging.getLogger(__name__)


class SymbolIndex:
    """
    Workspace-wide symbol table.

    Every mutation replaces or removes the entries of exactly one document under a lock,
    so readers never observe a half-updated document. Read accessors return copies.
    """

    def __init__(self, parser: JinkParser | None = None) -> None:
        self._lock = threading.Lock()
        self._parser = parser or JinkParser()
        self._symbols_by_document: dict[str, list[JinkSymbol]] = {}
        self._imports_by_document: dict[str, list[JinkImport]] = {}
        self._symbols_by_name: dict[str, list[JinkSymbol]] = {}  # name -> symbols across documents

    def update(self, uri: str, text: str) -> None:
        """Re-index a document, fully replacing its previous symbols and imports."""
        result = self._parser.parse(uri, text)
        with self._lock:
            self._remove_unlocked(uri)
            self._symbols_by_document[uri] = result.symbols
            self._imports_by_document[uri] = result.imports
            for symbol in result.symbols:
                self._symbols_by_name.setdefault(symbol.name, []).append(symbol)
        log.debug(f"Indexed {uri}: {len(result.symbols)} symbols, {len(result.imports)} imports")

    def remove(self, uri: str) -> None:
        """Remove all data for a document from the index (thread-safe)."""
        with self._lock:
            self._remove_unlocked(uri)

    def _remove_unlocked(self, uri: str) -> None:
        """Must be called under lock."""
        symbols = self._symbols_by_document.pop(uri, None)
        if symbols:
            for name in {symbol.name for symbol in symbols}:
                remaining = [s for s in self._symbols_by_name.get(name, []) if s.uri != uri]
                if remaining:
                    self._symbols_by_name[name] = remaining
                else:
                    self._symbols_by_name.pop(name, None)
        self._imports_by_document.pop(uri, None)

    def clear(self) -> None:
        """Clear the entire index (thread-safe)."""
        with self._lock:
            self._symbols_by_document.clear()
            self._imports_by_document.clear()
            self._symbols_by_name.clear()

    # ─── Read accessors ────────────────────────────────────────────────

    def get_definition(self, name: str) -> list[JinkSymbol]:
        """All symbols with the given name, across documents."""
        with self._lock:
            return list(self._symbols_by_name.get(name, []))

    def get_all_symbols(self) -> list[JinkSymbol]:
        with self._lock:
            return [symbol for symbols in self._symbols_by_name.values() for symbol in symbols]

    def get_imports(self, uri: str) -> list[JinkImport]:
        with self._lock:
            return list(self._imports_by_document.get(uri, []))

    def get_symbols_in(self, uri: str) -> list[JinkSymbol]:
        with self._lock:
            return list(self._symbols_by_document.get(uri, []))

    def get_known_documents(self) -> list[str]:
        """Indexed documents in the order they were (last) indexed."""
        with self._lock:
            return list(self._symbols_by_document.keys())

    def resolve_module(self, module_path: str) -> str | None:
        """Find the indexed document a dotted module path refers to."""
        return resolve_module(module_path, self.get_known_documents())

    def get_public_symbol(self, uri: str, name: str) -> JinkSymbol | None:
        for symbol in self.get_symbols_in(uri):
            if symbol.name == name and symbol.is_public:
                return symbol
        return None

    def get_stats(self) -> dict[str, int]:
        """Get index statistics."""
        with self._lock:
            return {
                "documents": len(self._symbols_by_document),
                "symbols": sum(len(symbols) for symbols in self._symbols_by_document.values()),
                "public_symbols": sum(
                    1 for symbols in self._symbols_by_document.values() for symbol in symbols if symbol.is_public
                ),
                "imports": sum(len(imports) for imports in self._imports_by_document.values()),
                "unique_names": len(self._symbols_by_name),
            }

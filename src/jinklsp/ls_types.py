"""
Plain data types shared by the Jink analysis core.
They mirror the LSP structures closely but do not depend on any LSP library.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum


@dataclass(frozen=True)
class Position:
    line: int  # 0-based
    character: int  # 0-based


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position

    @classmethod
    def create(cls, start_line: int, start_character: int, end_line: int, end_character: int) -> "Range":
        return cls(Position(start_line, start_character), Position(end_line, end_character))

    @classmethod
    def zero(cls) -> "Range":
        """Zero-length range at the start of a document."""
        return cls.create(0, 0, 0, 0)


@dataclass(frozen=True)
class Location:
    uri: str
    range: Range


class SymbolKind(Enum):
    VARIABLE = "variable"
    CONSTANT = "constant"
    TYPE_ALIAS = "type-alias"
    STRUCT = "struct-type"
    FUNCTION = "function"
    EXTERN_FUNCTION = "extern-function"
    CLASS = "class"
    FIELD = "field"


@dataclass
class JinkParameter:
    """Parameter of a function or extern function."""

    name: str
    type: str


@dataclass
class JinkSymbol:
    """A named declaration found in a Jink document."""

    name: str
    kind: SymbolKind
    uri: str  # Owning document
    range: Range  # Range of the name token
    is_public: bool
    children: list["JinkSymbol"] = field(default_factory=list)  # Struct fields
    parameters: list[JinkParameter] | None = None  # Functions only

    @property
    def field_names(self) -> list[str]:
        return [child.name for child in self.children]


@dataclass
class ImportedName:
    name: str
    alias: str | None = None

    @property
    def local_name(self) -> str:
        return self.alias or self.name


@dataclass
class JinkImport:
    """One import statement of a document."""

    module_path: str  # Dotted module path, e.g. "std.io"
    range: Range  # Range of the whole statement
    alias: str | None = None
    is_wildcard: bool = False
    names: list[ImportedName] = field(default_factory=list)  # Selective imports

    @property
    def default_name(self) -> str:
        """Name under which a bare module import is visible, i.e. the last path segment."""
        return self.module_path.split(".")[-1]


class DiagnosticSeverity(IntEnum):
    ERROR = 1
    WARNING = 2


@dataclass
class Diagnostic:
    range: Range
    message: str
    severity: DiagnosticSeverity
    source: str = "jink"


class CompletionItemKind(IntEnum):
    # Values follow the LSP specification
    FUNCTION = 3
    VARIABLE = 6
    CLASS = 7
    STRUCT = 22
    CONSTANT = 21
    TYPE_PARAMETER = 25


@dataclass
class TextEdit:
    range: Range
    new_text: str


@dataclass
class CompletionItem:
    label: str
    kind: CompletionItemKind
    detail: str | None = None
    additional_text_edits: list[TextEdit] = field(default_factory=list)

"""
Surface of the Jink language as far as the analysis core needs it.
"""

KEYWORDS: tuple[str, ...] = (
    "if",
    "else",
    "elseif",
    "return",
    "del",
    "fun",
    "let",
    "const",
    "type",
    "cls",
    "pub",
    "import",
    "from",
    "as",
    "while",
    "for",
    "in",
    "break",
    "continue",
    "enum",
    "extern",
)

# Names that are always in scope
BUILTINS: tuple[str, ...] = (
    "void",
    "true",
    "false",
    "null",
    "self",
    "int",
    "float",
    "string",
    "bool",
    "ptr",
    "obj",
    "__ptr_write_int",
    "__ptr_read_int",
    "__ptr_write_string",
    "__ptr_read_string",
)

DECLARATION_KEYWORDS: frozenset[str] = frozenset({"let", "const", "type", "enum", "cls", "fun", "extern"})

PUBLIC_KEYWORD = "pub"
FUNCTION_KEYWORD = "fun"
CLASS_KEYWORD = "cls"
TYPE_KEYWORD = "type"
ENUM_KEYWORD = "enum"
IMPORT_KEYWORD = "import"
EXTERN_KEYWORD = "extern"
RETURN_KEYWORD = "return"

FILE_EXTENSION = ".jk"
DIAGNOSTIC_SOURCE = "jink"

IDENTIFIER_PATTERN = r"[a-zA-Z_][a-zA-Z0-9_]*"

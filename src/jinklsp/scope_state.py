"""
Finite-state machine tracking the syntactic context of a token stream, plus the lexical scope stack.

Jink reuses ``{...}`` for blocks, struct bodies, enum bodies and record values, and has no
grammar-backed parser here. The machine infers the context from the previous significant
token and a stack of context states (base state NORMAL).

Transition table (current state -> effect):

=============  ================================================================
Trigger        Effect
=============  ================================================================
decl keyword   remember as last declaration keyword
``fun``/``cls``  arm "expecting argument list" (any other keyword disarms it)
``import``     push IMPORT_STMT
``extern``     push EXTERN_DECL
``->``         push RETURN_TYPE
``{``          RETURN_TYPE: pop first. IMPORT_STMT: push IMPORT_STMT, no scope.
               Otherwise open a scope seeded with buffered parameters and push
               a state chosen by the previous token: ``type`` -> STRUCT_BODY;
               ``=`` after ``enum`` -> ENUM_BODY; one of ``= ( , : return [``
               -> OBJECT_LITERAL; anything else -> NORMAL
``}``          IMPORT_STMT: pop state only. Otherwise pop scope and state
               (never below the global scope / NORMAL)
``(``          armed: push FUN_ARGS. EXTERN_DECL right after ``extern``: push
               EXTERN_ABI. EXTERN_DECL otherwise: push FUN_ARGS
``)``          pop FUN_ARGS or EXTERN_ABI
``;``          pop IMPORT_STMT or RETURN_TYPE, then a dangling EXTERN_DECL;
               drop buffered parameters
=============  ================================================================
"""

from dataclasses import dataclass, field
from enum import Enum

from jinklsp.jink_language import (
    CLASS_KEYWORD,
    DECLARATION_KEYWORDS,
    ENUM_KEYWORD,
    EXTERN_KEYWORD,
    FUNCTION_KEYWORD,
    IMPORT_KEYWORD,
    RETURN_KEYWORD,
    TYPE_KEYWORD,
)
from jinklsp.jink_lexer import TokenKind


class ContextState(Enum):
    NORMAL = "normal"
    FUN_ARGS = "fun_args"
    STRUCT_BODY = "struct_body"
    OBJECT_LITERAL = "object_literal"
    IMPORT_STMT = "import_stmt"
    RETURN_TYPE = "return_type"
    EXTERN_DECL = "extern_decl"
    EXTERN_ABI = "extern_abi"
    ENUM_BODY = "enum_body"


# Identifiers in these states are recorded but never validated
NON_SEMANTIC_STATES = frozenset(
    {ContextState.IMPORT_STMT, ContextState.RETURN_TYPE, ContextState.EXTERN_ABI, ContextState.ENUM_BODY}
)

# A '{' following one of these tokens opens a value, not a block
VALUE_CONTEXT_PRECEDERS = frozenset({"=", "(", ",", ":", RETURN_KEYWORD, "["})


class IdentifierRole(Enum):
    MEMBER_ACCESS = "member_access"
    NON_SEMANTIC = "non_semantic"
    DECLARATION = "declaration"
    PARAMETER = "parameter"
    TYPE_REFERENCE = "type_reference"
    LABEL = "label"
    USAGE = "usage"


@dataclass
class PunctuationEffect:
    """What a punctuation token does to the scope stack."""

    opens_scope: bool = False
    closes_scope: bool = False
    parameters: list[str] = field(default_factory=list)  # Names seeding an opened scope


class ContextStateMachine:
    """Tracks the context-state stack and the look-back state needed to classify identifiers."""

    def __init__(self) -> None:
        self._states: list[ContextState] = [ContextState.NORMAL]
        self._last_kind: TokenKind | None = None
        self._last_text = ""
        self.last_declaration_keyword = ""
        self.expecting_argument_list = False
        self.pending_parameters: list[str] = []

    @property
    def current(self) -> ContextState:
        return self._states[-1]

    @property
    def states(self) -> list[ContextState]:
        return list(self._states)

    @property
    def last_token(self) -> str:
        return self._last_text

    def _remember(self, kind: TokenKind, text: str) -> None:
        self._last_kind = kind
        self._last_text = text

    def _pop(self) -> None:
        if len(self._states) > 1:
            self._states.pop()

    def on_string(self) -> None:
        self.expecting_argument_list = False
        self._remember(TokenKind.STRING, "")

    def on_arrow(self) -> None:
        self._states.append(ContextState.RETURN_TYPE)
        self._remember(TokenKind.ARROW, "->")

    def on_keyword(self, keyword: str) -> None:
        if keyword in DECLARATION_KEYWORDS:
            self.last_declaration_keyword = keyword
        self.expecting_argument_list = keyword in (FUNCTION_KEYWORD, CLASS_KEYWORD)

        if keyword == IMPORT_KEYWORD:
            self._states.append(ContextState.IMPORT_STMT)
        elif keyword == EXTERN_KEYWORD:
            self._states.append(ContextState.EXTERN_DECL)

        self._remember(TokenKind.KEYWORD, keyword)

    def on_punctuation(self, punctuation: str) -> PunctuationEffect:
        current = self.current
        effect = PunctuationEffect()

        if punctuation == "{":
            self.expecting_argument_list = False
            if current == ContextState.RETURN_TYPE:
                self._pop()  # the body follows the return type annotation
            if current == ContextState.IMPORT_STMT:
                # Braces of an import list carry no scope; the previous token is kept
                self._states.append(ContextState.IMPORT_STMT)
                return effect

            effect.opens_scope = True
            effect.parameters = self.pending_parameters
            self.pending_parameters = []
            self._states.append(self._state_for_open_brace())

        elif punctuation == "}":
            self.expecting_argument_list = False
            if current == ContextState.IMPORT_STMT:
                self._pop()
                return effect
            effect.closes_scope = True
            self._pop()

        elif punctuation == "(":
            if self.expecting_argument_list:
                self._states.append(ContextState.FUN_ARGS)
                self.expecting_argument_list = False
            elif current == ContextState.EXTERN_DECL:
                if self._last_kind == TokenKind.KEYWORD and self._last_text == EXTERN_KEYWORD:
                    self._states.append(ContextState.EXTERN_ABI)
                else:
                    self._states.append(ContextState.FUN_ARGS)

        elif punctuation == ")":
            self.expecting_argument_list = False
            if current in (ContextState.FUN_ARGS, ContextState.EXTERN_ABI):
                self._pop()

        elif punctuation == ";":
            if current in (ContextState.IMPORT_STMT, ContextState.RETURN_TYPE):
                self._pop()
            if self.current == ContextState.EXTERN_DECL:
                self._pop()
            self.pending_parameters = []
            self.expecting_argument_list = False

        else:
            self.expecting_argument_list = False

        self._remember(TokenKind.PUNCTUATION, punctuation)
        return effect

    def _state_for_open_brace(self) -> ContextState:
        last = self._last_text if self._last_kind in (TokenKind.KEYWORD, TokenKind.PUNCTUATION) else None
        if last == TYPE_KEYWORD:
            return ContextState.STRUCT_BODY
        if last == "=" and self.last_declaration_keyword == ENUM_KEYWORD:
            return ContextState.ENUM_BODY
        if last in VALUE_CONTEXT_PRECEDERS:
            return ContextState.OBJECT_LITERAL
        return ContextState.NORMAL

    def classify_identifier(
        self,
        name: str,
        preceded_by_dot: bool = False,
        is_rest: bool = False,
        preceded_by_colon: bool = False,
        followed_by_colon: bool = False,
    ) -> IdentifierRole:
        """
        Decide what an identifier means in the current context and advance the look-back state.

        :param preceded_by_dot: the character right before the identifier is '.'
        :param is_rest: the identifier follows a '...' rest marker
        :param preceded_by_colon: the previous non-whitespace character is ':'
        :param followed_by_colon: the next non-whitespace character is ':'
        """
        role = self._classify(preceded_by_dot, is_rest, preceded_by_colon, followed_by_colon)
        if role == IdentifierRole.PARAMETER:
            self.pending_parameters.append(name)
        self._remember(TokenKind.IDENTIFIER, name)
        return role

    def _classify(
        self, preceded_by_dot: bool, is_rest: bool, preceded_by_colon: bool, followed_by_colon: bool
    ) -> IdentifierRole:
        current = self.current

        if preceded_by_dot and not is_rest:
            self.expecting_argument_list = False
            return IdentifierRole.MEMBER_ACCESS

        if current in NON_SEMANTIC_STATES:
            return IdentifierRole.NON_SEMANTIC

        # "let name", "fun name" as well as "Type name"
        if self._last_kind == TokenKind.KEYWORD and self._last_text in DECLARATION_KEYWORDS:
            return IdentifierRole.DECLARATION
        if self._last_kind == TokenKind.IDENTIFIER:
            return IdentifierRole.DECLARATION

        if current == ContextState.EXTERN_DECL:
            return IdentifierRole.DECLARATION

        self.expecting_argument_list = False

        if current == ContextState.FUN_ARGS:
            return IdentifierRole.TYPE_REFERENCE if preceded_by_colon else IdentifierRole.PARAMETER

        if current in (ContextState.STRUCT_BODY, ContextState.OBJECT_LITERAL) and followed_by_colon:
            return IdentifierRole.LABEL

        return IdentifierRole.USAGE


class ScopeStack:
    """Stack of name sets; the first one is the global scope and is never popped."""

    def __init__(self, global_names: set[str] | None = None) -> None:
        self._scopes: list[set[str]] = [set(global_names or ())]

    def __len__(self) -> int:
        return len(self._scopes)

    def push(self, names: list[str] | None = None) -> None:
        self._scopes.append(set(names or ()))

    def pop(self) -> None:
        if len(self._scopes) > 1:
            self._scopes.pop()

    def declare(self, name: str) -> None:
        self._scopes[-1].add(name)

    def resolves(self, name: str) -> bool:
        for scope in reversed(self._scopes):
            if name in scope:
                return True
        return False

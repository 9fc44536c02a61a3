from jinklsp.jink_lexer import TokenKind, strip_comments, tokenize


def test_strip_comments_preserves_offsets():
    text = "let a = 1; // trailing\nlet b = 2;"

    stripped = strip_comments(text)

    assert len(stripped) == len(text)
    assert "trailing" not in stripped
    assert stripped.index("let b") == text.index("let b")


def test_strip_block_comment_keeps_line_breaks():
    text = "/* first\nsecond */\nlet c = 3;"

    stripped = strip_comments(text)

    assert stripped.count("\n") == 2
    assert stripped.splitlines()[2] == "let c = 3;"
    assert stripped.strip() == "let c = 3;"


def test_tokenize_kinds():
    tokens = list(tokenize('fun f() -> int { return "a b"; }'))

    assert [(t.kind, t.text) for t in tokens] == [
        (TokenKind.KEYWORD, "fun"),
        (TokenKind.IDENTIFIER, "f"),
        (TokenKind.PUNCTUATION, "("),
        (TokenKind.PUNCTUATION, ")"),
        (TokenKind.ARROW, "->"),
        (TokenKind.IDENTIFIER, "int"),
        (TokenKind.PUNCTUATION, "{"),
        (TokenKind.KEYWORD, "return"),
        (TokenKind.STRING, '"a b"'),
        (TokenKind.PUNCTUATION, ";"),
        (TokenKind.PUNCTUATION, "}"),
    ]


def test_tokenize_offsets_and_numbers():
    tokens = list(tokenize("x = 42 + y"))

    assert [(t.text, t.offset) for t in tokens] == [("x", 0), ("=", 2), ("+", 7), ("y", 9)]


def test_keyword_prefix_is_an_identifier():
    tokens = list(tokenize("letter elseif"))

    assert [(t.kind, t.text) for t in tokens] == [
        (TokenKind.IDENTIFIER, "letter"),
        (TokenKind.KEYWORD, "elseif"),
    ]


def test_escaped_quote_stays_inside_string():
    tokens = list(tokenize(r'"say \"hi\"" x'))

    assert tokens[0].kind == TokenKind.STRING
    assert tokens[1].text == "x"


def test_comment_markers_inside_strings_are_kept():
    text = 'let url = "http://example.com"; // trailing\nlet s = "/* not a comment */";'

    stripped = strip_comments(text)

    assert len(stripped) == len(text)
    assert 'let url = "http://example.com";' in stripped
    assert "trailing" not in stripped
    assert 'let s = "/* not a comment */";' in stripped


def test_line_marker_inside_block_comment():
    stripped = strip_comments("/* a // b */ let x = y;")

    assert stripped.strip() == "let x = y;"

from __future__ import annotations

import pytest

from i18ncheck.tokenizers import JavaTokenizer, PythonTokenizer, TokenKind, strip_delimiters, tokenizer_for


def _strings(tokens):
    return [(t.text, t.line) for t in tokens if t.kind is TokenKind.STRING]


def test_java_escaped_quote_and_char_literal():
    src = "String s = \"a\\\"b\"; char c = '\"'; // NOI18N\n"
    tokens = list(JavaTokenizer().tokenize(src))

    assert _strings(tokens) == [('"a\\"b"', 1)]
    comments = [t for t in tokens if t.kind is TokenKind.LINE_COMMENT]
    assert [c.text for c in comments] == ["// NOI18N"]


def test_java_block_comment_keeps_line_numbers():
    src = '/* "not a string"\n */ String x = "yes";\n'
    assert _strings(JavaTokenizer().tokenize(src)) == [('"yes"', 2)]


def test_java_text_block_reported_on_opening_line():
    src = 'String t = """\n    hello\n    """;\nString u = "after";\n'
    strings = _strings(JavaTokenizer().tokenize(src))

    assert strings[0][1] == 1
    assert strings[0][0].startswith('"""')
    assert strings[1] == ('"after"', 4)


def test_java_unterminated_string_ends_at_newline():
    src = 'String s = "abc\nString t = "def";\n'
    assert _strings(JavaTokenizer().tokenize(src)) == [('"abc', 1), ('"def"', 2)]


def test_java_annotation_and_assert():
    src = '@Override\nvoid f() { assert x : "boom"; }\n'
    kinds = [(t.kind, t.line) for t in JavaTokenizer().tokenize(src)]

    assert (TokenKind.ANNOTATION_MARK, 1) in kinds
    assert (TokenKind.ASSERT_KEYWORD, 2) in kinds


def test_java_crlf_line_counting():
    src = 'int a;\r\nString s = "x1";\r\n'
    assert _strings(JavaTokenizer().tokenize(src)) == [('"x1"', 2)]


def test_python_tokens():
    src = 'x = _("Hello")  # NOI18N\n@deco\ndef f():\n    assert y, "msg"\n'
    tokens = list(PythonTokenizer().tokenize(src))

    assert _strings(tokens) == [('"Hello"', 1), ('"msg"', 4)]
    assert any(t.kind is TokenKind.LINE_COMMENT and t.line == 1 for t in tokens)
    assert any(t.kind is TokenKind.ANNOTATION_MARK and t.line == 2 for t in tokens)
    assert any(t.kind is TokenKind.ASSERT_KEYWORD and t.line == 4 for t in tokens)


def test_python_tokenizer_stops_on_error():
    src = 'a = "ok"\nb = (\n'
    assert _strings(PythonTokenizer().tokenize(src)) == [('"ok"', 1)]


@pytest.mark.parametrize(
    "literal,expected",
    [
        ('"abc"', "abc"),
        ("'x y'", "x y"),
        ('rb"raw"', "raw"),
        ('"""doc"""', "doc"),
        ('"open', "open"),
    ],
)
def test_strip_delimiters(literal, expected):
    assert strip_delimiters(literal) == expected


def test_tokenizer_for_suffix():
    assert isinstance(tokenizer_for("Foo.java"), JavaTokenizer)
    assert isinstance(tokenizer_for("foo.py"), PythonTokenizer)
    with pytest.raises(ValueError):
        tokenizer_for("notes.txt")

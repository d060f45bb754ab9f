"""Lexical scanners producing the small token vocabulary the extractor needs.

Only a handful of token kinds matter for string extraction, so each source
language gets a flat scanner instead of a parser. Add a language by
subclassing ``Tokenizer`` and registering its suffix in ``TOKENIZERS``.
"""

from __future__ import annotations

import io
import re
import tokenize
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator


class TokenKind(Enum):
    STRING = "string"
    LINE_COMMENT = "line_comment"
    IDENTIFIER = "identifier"
    ANNOTATION_MARK = "annotation_mark"
    ASSERT_KEYWORD = "assert_keyword"
    OTHER = "other"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    line: int


STRING_PREFIX_RX = re.compile(r"^[A-Za-z]*")


def strip_delimiters(literal: str) -> str:
    body = STRING_PREFIX_RX.sub("", literal, count=1)
    for quote in ('"""', "'''", '"', "'"):
        if body.startswith(quote):
            body = body[len(quote):]
            if body.endswith(quote):
                body = body[: -len(quote)]
            return body
    return body


class Tokenizer(ABC):
    @abstractmethod
    def tokenize(self, text: str) -> Iterator[Token]:
        raise NotImplementedError


JAVA_TOKEN_RX = re.compile(
    r"""
    (?P<line_comment>//[^\n]*)
  | (?P<block_comment>/\*.*?(?:\*/|\Z))
  | (?P<text_block>\"\"\"(?:\\.|[^\\])*?(?:\"\"\"|\Z))
  | (?P<string>"(?:\\[^\n]|[^"\\\n])*"?)
  | (?P<char>'(?:\\[^\n]|[^'\\\n])*'?)
  | (?P<number>\d[\w.]*)
  | (?P<identifier>[^\W\d][\w$]*|\$[\w$]*)
  | (?P<annotation>@)
  | (?P<space>\s+)
  | (?P<other>.)
    """,
    re.VERBOSE | re.DOTALL,
)


class JavaTokenizer(Tokenizer):
    def tokenize(self, text: str) -> Iterator[Token]:
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        line = 1
        for match in JAVA_TOKEN_RX.finditer(text):
            group = match.lastgroup
            value = match.group()
            if group == "space":
                line += value.count("\n")
                continue
            if group in ("string", "text_block"):
                kind = TokenKind.STRING
            elif group == "line_comment":
                kind = TokenKind.LINE_COMMENT
            elif group == "identifier":
                kind = TokenKind.ASSERT_KEYWORD if value == "assert" else TokenKind.IDENTIFIER
            elif group == "annotation":
                kind = TokenKind.ANNOTATION_MARK
            else:
                kind = TokenKind.OTHER
            yield Token(kind, value, line)
            line += value.count("\n")


FSTRING_START_TYPES = {
    getattr(tokenize, name) for name in ("FSTRING_START", "TSTRING_START") if hasattr(tokenize, name)
}
FSTRING_END_TYPES = {
    getattr(tokenize, name) for name in ("FSTRING_END", "TSTRING_END") if hasattr(tokenize, name)
}


class PythonTokenizer(Tokenizer):
    def tokenize(self, text: str) -> Iterator[Token]:
        depth = 0
        parts: list[str] = []
        start_line = 0
        try:
            for tok in tokenize.generate_tokens(io.StringIO(text).readline):
                line = tok.start[0]
                if tok.type in FSTRING_START_TYPES:
                    if depth == 0:
                        parts = []
                        start_line = line
                    depth += 1
                if depth:
                    parts.append(tok.string)
                    if tok.type in FSTRING_END_TYPES:
                        depth -= 1
                        if depth == 0:
                            yield Token(TokenKind.STRING, "".join(parts), start_line)
                    continue
                if tok.type == tokenize.STRING:
                    yield Token(TokenKind.STRING, tok.string, line)
                elif tok.type == tokenize.COMMENT:
                    yield Token(TokenKind.LINE_COMMENT, tok.string, line)
                elif tok.type == tokenize.NAME:
                    kind = TokenKind.ASSERT_KEYWORD if tok.string == "assert" else TokenKind.IDENTIFIER
                    yield Token(kind, tok.string, line)
                elif tok.type == tokenize.OP and tok.string == "@":
                    yield Token(TokenKind.ANNOTATION_MARK, tok.string, line)
                elif tok.type in (tokenize.NL, tokenize.NEWLINE, tokenize.INDENT, tokenize.DEDENT):
                    continue
                else:
                    yield Token(TokenKind.OTHER, tok.string, line)
        except (tokenize.TokenError, SyntaxError):
            return


TOKENIZERS: Dict[str, type[Tokenizer]] = {
    ".java": JavaTokenizer,
    ".py": PythonTokenizer,
}


def tokenizer_for(path: str | Path) -> Tokenizer:
    suffix = Path(path).suffix.lower()
    if suffix not in TOKENIZERS:
        available = ", ".join(sorted(TOKENIZERS))
        raise ValueError(f"No tokenizer for {suffix or path!s}. Supported: {available}")
    return TOKENIZERS[suffix]()

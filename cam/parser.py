"""Surface-syntax parser — recursive descent with one-character lookahead.

Grammar::

    expr   := 'lambda' ident [':' type] '.' expr
            | chain [('+' | '*') chain]
    chain  := atom atom*                 (left-folded application)
    atom   := number | ident | '(' expr ')'
    type   := tatom ['->' type]
    tatom  := ident | '(' type ')'
"""

from __future__ import annotations

import logging

from .errors import ParseError
from .terms import Application, BinaryOp, Constant, Lambda, Term, Variable
from .type_system import INT, Type, TypeArrow, TypeConst
from . import constants

logger = logging.getLogger(__name__)


def _is_ident_start(c: str) -> bool:
    return c.isascii() and c.isalpha()


def _is_ident_char(c: str) -> bool:
    return c.isascii() and (c.isalnum() or c == "_")


def _is_digit(c: str) -> bool:
    return c.isascii() and c.isdigit()


class Parser:
    """Parses one complete term (or type) from a string."""

    def __init__(self, text: str):
        self._text = text
        self._pos = 0

    # ── character helpers ────────────────────────────────────────

    def _peek(self) -> str:
        return self._text[self._pos] if self._pos < len(self._text) else ""

    def _skip_ws(self) -> None:
        while self._pos < len(self._text) and self._text[self._pos].isspace():
            self._pos += 1

    def _error(self, message: str, expected: str = "") -> ParseError:
        return ParseError(message, self._text, self._pos, expected)

    def _unexpected(self, expected: str) -> ParseError:
        c = self._peek()
        if not c:
            return self._error("Unexpected end of input", expected)
        return self._error(f"Unexpected character {c!r}", expected)

    def _expect(self, literal: str) -> None:
        self._skip_ws()
        if not self._text.startswith(literal, self._pos):
            raise self._unexpected(repr(literal))
        self._pos += len(literal)

    def _at_keyword(self, keyword: str) -> bool:
        end = self._pos + len(keyword)
        if not self._text.startswith(keyword, self._pos):
            return False
        return end >= len(self._text) or not _is_ident_char(self._text[end])

    def _identifier(self) -> str:
        self._skip_ws()
        if not _is_ident_start(self._peek()):
            raise self._unexpected("identifier")
        start = self._pos
        while _is_ident_char(self._peek()):
            self._pos += 1
        name = self._text[start : self._pos]
        if name == constants.LAMBDA_KEYWORD:
            self._pos = start
            raise self._error("Reserved keyword used as identifier", "identifier")
        return name

    def _number(self) -> int:
        start = self._pos
        while _is_digit(self._peek()):
            self._pos += 1
        if _is_ident_start(self._peek()):
            raise self._unexpected("digit or delimiter")
        return int(self._text[start : self._pos])

    def _finish(self) -> None:
        self._skip_ws()
        if self._pos < len(self._text):
            raise self._error("Trailing input after complete term", "end of input")

    # ── terms ────────────────────────────────────────────────────

    def parse(self) -> Term:
        term = self._expr()
        self._finish()
        return term

    def _expr(self) -> Term:
        self._skip_ws()
        if self._at_keyword(constants.LAMBDA_KEYWORD):
            return self._lambda()
        left = self._chain()
        self._skip_ws()
        op = self._peek()
        if op not in constants.BINARY_OPERATORS:
            return left
        self._pos += 1
        right = self._chain()
        self._skip_ws()
        if self._peek() in constants.BINARY_OPERATORS:
            raise self._error(
                "Chained binary operators need explicit parentheses", "')'"
            )
        return BinaryOp(op, left, right)

    def _lambda(self) -> Lambda:
        self._pos += len(constants.LAMBDA_KEYWORD)
        param = self._identifier()
        self._skip_ws()
        param_type: Type | None = None
        if self._peek() == constants.TYPE_ANNOTATION:
            self._pos += 1
            param_type = self._type()
        self._expect(constants.LAMBDA_SEPARATOR)
        body = self._expr()
        return Lambda(param, body, param_type)

    def _starts_atom(self) -> bool:
        c = self._peek()
        if c == "(" or _is_digit(c):
            return True
        return _is_ident_start(c) and not self._at_keyword(constants.LAMBDA_KEYWORD)

    def _chain(self) -> Term:
        self._skip_ws()
        term = self._atom()
        while True:
            self._skip_ws()
            if self._at_keyword(constants.LAMBDA_KEYWORD):
                # trailing lambda argument: ``f lambda x. x``
                return Application(term, self._lambda())
            if not self._starts_atom():
                return term
            term = Application(term, self._atom())

    def _atom(self) -> Term:
        self._skip_ws()
        c = self._peek()
        if _is_digit(c):
            return Constant(self._number(), INT)
        if _is_ident_start(c):
            return Variable(self._identifier())
        if c == "(":
            open_pos = self._pos
            self._pos += 1
            inner = self._expr()
            self._skip_ws()
            if self._peek() != ")":
                if not self._peek():
                    raise ParseError(
                        "Unterminated parenthesis opened", self._text, open_pos, "')'"
                    )
                raise self._unexpected("')'")
            self._pos += 1
            return inner
        raise self._unexpected("number, identifier or '('")

    # ── types ────────────────────────────────────────────────────

    def parse_type(self) -> Type:
        t = self._type()
        self._finish()
        return t

    def _type(self) -> Type:
        left = self._type_atom()
        self._skip_ws()
        if self._text.startswith(constants.TYPE_ARROW, self._pos):
            self._pos += len(constants.TYPE_ARROW)
            return TypeArrow(left, self._type())
        return left

    def _type_atom(self) -> Type:
        self._skip_ws()
        if self._peek() == "(":
            self._pos += 1
            inner = self._type()
            self._expect(")")
            return inner
        if not _is_ident_start(self._peek()):
            raise self._unexpected("type name or '('")
        return TypeConst(self._identifier())


def parse(text: str) -> Term:
    """Parse *text* into a Term, raising ParseError on malformed input."""
    term = Parser(text).parse()
    logger.debug("Parsed %r -> %s", text, term)
    return term


def parse_type(text: str) -> Type:
    return Parser(text).parse_type()

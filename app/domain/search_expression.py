"""Boolean search expressions over search pairs.

Grammar (``!`` binds tighter than ``&``, which binds tighter than ``|``)::

    expr    := and_expr ('|' and_expr)*
    and_expr:= unary ('&' unary)*
    unary   := '!' unary | atom
    atom    := '(' expr ')' | PAIR
    PAIR    := key:value | key:'quoted value' | key:"quoted value"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from app.domain.search_query import (
    EXPRESSION_OPERATORS,
    EXPRESSION_PAIR_REGEX,
    SearchKey,
    SearchPair,
)
from app.errors import DomainValidationError



@dataclass(frozen=True, slots=True)
class Variable:
    search_pair: SearchPair


@dataclass(frozen=True, slots=True)
class Not:
    body: SearchExpression


@dataclass(frozen=True, slots=True)
class And:
    left: SearchExpression
    right: SearchExpression


@dataclass(frozen=True, slots=True)
class Or:
    left: SearchExpression
    right: SearchExpression


SearchExpression = Union[Variable, Not, And, Or]


def _tokenize(s: str) -> list[str | SearchPair]:
    tokens: list[str | SearchPair] = []
    pos = 0
    while pos < len(s):
        ch = s[pos]
        if ch.isspace():
            pos += 1
            continue
        if ch in EXPRESSION_OPERATORS:
            tokens.append(ch)
            pos += 1
            continue
        match = EXPRESSION_PAIR_REGEX.match(s, pos)
        if match is None:
            raise DomainValidationError(f"Unexpected input at position {pos}: {s[pos:pos + 20]!r}")
        raw_key = match.group(1)
        key = SearchKey.from_string(raw_key)
        if key is None:
            raise DomainValidationError(f"Unknown search key {raw_key!r}")
        value = next(g for g in match.groups()[1:] if g is not None).strip()
        if not value:
            raise DomainValidationError(f"Empty value for search key {raw_key!r}")
        tokens.append(SearchPair(key=key, values=value))
        pos = match.end()
    return tokens


class _Parser:
    def __init__(self, tokens: list[str | SearchPair]):
        self.tokens = tokens
        self.pos = 0

    def peek(self):
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def take(self):
        token = self.peek()
        self.pos += 1
        return token

    def parse(self) -> SearchExpression:
        expr = self.parse_or()
        if self.peek() is not None:
            raise DomainValidationError(f"Unexpected token {self.peek()!s} in search expression")
        return expr

    def parse_or(self) -> SearchExpression:
        left = self.parse_and()
        while self.peek() == "|":
            self.take()
            left = Or(left, self.parse_and())
        return left

    def parse_and(self) -> SearchExpression:
        left = self.parse_unary()
        while self.peek() == "&":
            self.take()
            left = And(left, self.parse_unary())
        return left

    def parse_unary(self) -> SearchExpression:
        if self.peek() == "!":
            self.take()
            return Not(self.parse_unary())
        return self.parse_atom()

    def parse_atom(self) -> SearchExpression:
        token = self.take()
        if token == "(":
            expr = self.parse_or()
            if self.take() != ")":
                raise DomainValidationError("Missing closing parenthesis in search expression")
            return expr
        if isinstance(token, SearchPair):
            return Variable(token)
        if token is None:
            raise DomainValidationError("Unexpected end of search expression")
        raise DomainValidationError(f"Unexpected token {token!s} in search expression")


def parse_search_expression(s: str) -> SearchExpression:
    """Parse ``s`` into a search expression tree.

    Raises:
        DomainValidationError: On unknown keys, stray text or unbalanced operators.
    """
    tokens = _tokenize(s)
    if not tokens:
        raise DomainValidationError("Empty search expression")
    return _Parser(tokens).parse()


def expression_search_pairs(expr: SearchExpression) -> list[SearchPair]:
    """All search pairs of ``expr``, left to right."""
    if isinstance(expr, Variable):
        return [expr.search_pair]
    if isinstance(expr, Not):
        return expression_search_pairs(expr.body)
    return expression_search_pairs(expr.left) + expression_search_pairs(expr.right)

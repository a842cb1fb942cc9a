"""Free-text search term grammar.

Valid tokens are ``key:value``, ``key:'value with spaces'`` and
``key:"value with spaces"``. Unquoted values may be a single character
(``zdb:1``). Tokens with an unknown key and text outside of any token are not
errors: they are reported back to the caller as warnings so the remaining
keyed pairs can still be searched.

A term is a boolean expression only when an operator stands next to a
``key:value`` token, e.g. ``tit:foo & !zdb:1`` or ``(tit:a | tit:b)``.
Operators must be separated from unquoted values by whitespace; closing
parentheses may follow a value directly. Operator characters anywhere else,
as in ``tit:Economics (2010)`` or ``lur:https://x.org/l?a=1&b=2``, are plain
text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

SEARCH_TOKEN_REGEX = re.compile(r"""\w+:'[^']+'|\w+:"[^"]+"|\w+:[^"'\s]\S*""")

# key:value inside a boolean expression. Groups: key, single-quoted,
# double-quoted and unquoted value; trailing ")" close groups.
EXPRESSION_PAIR_REGEX = re.compile(
    r"""(\w+):(?:'([^']*)'|"([^"]*)"|([^\s'"]+?)(?=\)*(?:\s|$)))"""
)

EXPRESSION_OPERATORS = frozenset("&|!()")

_PAIR_MARK = "\x00"
_QUOTED_REGEX = re.compile(r"'[^']*'|\"[^\"]*\"")
_EXPRESSION_ITEM_REGEX = re.compile(r"[()&|!]|\x00|[^\s()&|!\x00]+")


class SearchKey(str, Enum):
    """Search keys and the metadata column each one searches."""

    AUTHOR = "aut"
    COLLECTION = "col"
    COMMUNITY = "com"
    DOI = "doi"
    HANDLE = "hdl"
    ISBN = "isbn"
    ISSN = "issn"
    LICENCE_URL = "lur"
    PAKET_SIGEL = "sig"
    SERIES = "ser"
    TITLE = "tit"
    ZDB_ID = "zdb"

    @property
    def column_name(self) -> str:
        return _COLUMN_BY_KEY[self]

    @classmethod
    def from_string(cls, raw: str) -> SearchKey | None:
        try:
            return cls(raw.lower())
        except ValueError:
            return None


_COLUMN_BY_KEY = {
    SearchKey.AUTHOR: "author",
    SearchKey.COLLECTION: "collection_name",
    SearchKey.COMMUNITY: "community_name",
    SearchKey.DOI: "doi",
    SearchKey.HANDLE: "handle",
    SearchKey.ISBN: "isbn",
    SearchKey.ISSN: "issn",
    SearchKey.LICENCE_URL: "licence_url",
    SearchKey.PAKET_SIGEL: "paket_sigel",
    SearchKey.SERIES: "title_series",
    SearchKey.TITLE: "title",
    SearchKey.ZDB_ID: "zdb_id",
}


@dataclass(frozen=True, slots=True)
class SearchPair:
    key: SearchKey
    values: str

    def __str__(self) -> str:
        return f"{self.key.name}:{self.values}"


@dataclass
class ParsedSearchTerm:
    """Result of parsing a raw search term.

    ``expression`` is set only for boolean expressions (``&``, ``|``, ``!``,
    parentheses); otherwise ``pairs`` holds the keyed pairs in input order.
    """

    pairs: list[SearchPair] = field(default_factory=list)
    invalid_search_keys: list[str] = field(default_factory=list)
    has_search_token_with_no_key: bool = False
    expression: object | None = None

    @property
    def is_empty(self) -> bool:
        return not self.pairs and self.expression is None


def tokenize_search_input(s: str) -> list[str]:
    """Return all ``key:value`` tokens with their quotes removed."""
    return [m.group(0).replace("'", "").replace('"', "") for m in SEARCH_TOKEN_REGEX.finditer(s)]


def parse_valid_search_pairs(s: str | None) -> list[SearchPair]:
    if not s:
        return []
    pairs = []
    for token in tokenize_search_input(s):
        raw_key, _, value = token.partition(":")
        key = SearchKey.from_string(raw_key)
        if key is not None:
            pairs.append(SearchPair(key=key, values=value.strip()))
    return pairs


def parse_invalid_search_keys(s: str | None) -> list[str]:
    if not s:
        return []
    invalid = []
    for token in tokenize_search_input(s):
        raw_key = token.partition(":")[0]
        if SearchKey.from_string(raw_key) is None:
            invalid.append(raw_key)
    return invalid


def has_search_tokens_with_no_key(s: str | None) -> bool:
    if not s or not s.strip():
        return False
    return bool(SEARCH_TOKEN_REGEX.sub("", s).strip())


def search_pairs_to_string(pairs: list[SearchPair]) -> str:
    """Inverse of parse_valid_search_pairs."""
    return " ".join(f"{p.key.value}:'{p.values}'" for p in pairs)


def _in_operator_position(operator: str, before: str | None, after: str | None) -> bool:
    opens_operand = after in (_PAIR_MARK, "(", "!")
    closes_operand = before in (_PAIR_MARK, ")")
    if operator in "(!":
        return opens_operand
    if operator == ")":
        return closes_operand
    return closes_operand and opens_operand


def is_search_expression(s: str | None) -> bool:
    """True when ``s`` has an operator next to a ``key:value`` token.

    Operators inside values (quoted or not) and operators only touching plain
    text do not count.
    """
    if not s:
        return False
    masked = EXPRESSION_PAIR_REGEX.sub(f" {_PAIR_MARK} ", s)
    masked = _QUOTED_REGEX.sub(" ", masked)
    items = _EXPRESSION_ITEM_REGEX.findall(masked)
    for i, item in enumerate(items):
        if item not in EXPRESSION_OPERATORS:
            continue
        before = items[i - 1] if i > 0 else None
        after = items[i + 1] if i + 1 < len(items) else None
        if _in_operator_position(item, before, after):
            return True
    return False


def parse_search_term(s: str | None) -> ParsedSearchTerm:
    """Parse a raw search term into keyed pairs plus warnings.

    Raises:
        DomainValidationError: If ``s`` is a malformed boolean expression.
    """
    if not s or not s.strip():
        return ParsedSearchTerm()
    if is_search_expression(s):
        # Local import: search_expression depends on this module.
        from app.domain.search_expression import parse_search_expression

        return ParsedSearchTerm(expression=parse_search_expression(s))
    return ParsedSearchTerm(
        pairs=parse_valid_search_pairs(s),
        invalid_search_keys=parse_invalid_search_keys(s),
        has_search_token_with_no_key=has_search_tokens_with_no_key(s),
    )

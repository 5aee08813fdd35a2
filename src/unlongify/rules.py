"""Ordered rewrite rules for code and string-literal tokens.

Each table is applied rule by rule, every rule running over the whole output
of the one before it. The order matters: ``long long`` and
``unsigned long long`` are swapped for sentinels before the bare ``long``
rule runs and restored afterwards, so only singleton ``long`` is narrowed.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Rule:
    """A regular expression and its ``re.sub`` replacement (template or function)."""

    pattern: re.Pattern[str]
    replacement: str | Callable[[re.Match[str]], str]

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


def apply_rules(text: str, rules: Iterable[Rule]) -> str:
    """Run text through each rule in order."""
    for rule in rules:
        text = rule.apply(text)
    return text


# Whitespace as C and RE2 see it: ASCII only, no \v.
_WS = r"[\t\n\f\r ]"

# Keyword boundaries, checked but not consumed: start of text, whitespace,
# "(" or "," before; whitespace, ")" or "*" after.
_LEFT = r"(?<![^\t\n\f\r (,])"
_RIGHT = r"(?=[\t\n\f\r )*])"

# NUL never appears in well-formed C source; the rewriter rejects code
# containing it before any rule runs.
LONG_LONG_SENTINEL = "\x00LL\x00"
UNSIGNED_LONG_LONG_SENTINEL = "\x00ULL\x00"


def _keyword(words: str, replacement: str) -> Rule:
    return Rule(re.compile(_LEFT + words + _RIGHT), replacement)


def _restore(sentinel: str, words: str) -> Rule:
    return Rule(re.compile(re.escape(sentinel)), words)


def _collapse_long_int(m: re.Match[str]) -> str:
    # "long long int" is left for the long long sentinel rule
    if m.group("ll"):
        return m.group(0)
    return "int"


CODE_RULES: tuple[Rule, ...] = (
    # long unsigned -> unsigned long, int unsigned -> unsigned int
    Rule(re.compile(r"((?:(?:long|int) )+)unsigned" + _WS + "*"), r"unsigned \1"),
    Rule(re.compile(_LEFT + rf"(?P<ll>long{_WS}+)?long{_WS}+int" + _RIGHT), _collapse_long_int),
    _keyword(rf"unsigned{_WS}+long{_WS}+long", UNSIGNED_LONG_LONG_SENTINEL),
    _keyword(rf"long{_WS}+long", LONG_LONG_SENTINEL),
    _keyword(rf"long(?!{_WS}+double\b)", "int"),
    _restore(LONG_LONG_SENTINEL, "long long"),
    _restore(UNSIGNED_LONG_LONG_SENTINEL, "unsigned long long"),
)

STRING_RULES: tuple[Rule, ...] = (
    # %ld -> %d, %-08lu -> %-08u, %*.*lx -> %*.*x, %1$ld -> %1$d
    Rule(
        re.compile(
            r"(?P<l>%(?P<flag>[-+ 0#'I]*)(?P<width>\*?[0-9]*\$?)(?P<precision>\.\*?[0-9]*\$?)?)"
            r"l?(?P<r>[idouxX])"
        ),
        r"\g<l>\g<r>",
    ),
)

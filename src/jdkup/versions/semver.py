"""Semantic version and range parsing."""

import re
from typing import List, NamedTuple, Optional, Tuple

from ..errors import ParseError
from .models import Version

_NUM = r"0|[1-9]\d*"
_IDENT = r"[0-9A-Za-z-]+"
VERSION_RE = re.compile(
    rf"^({_NUM})\.({_NUM})\.({_NUM})"
    rf"(?:-({_IDENT}(?:\.{_IDENT})*))?"
    rf"(?:\+({_IDENT}(?:\.{_IDENT})*))?$"
)
PARTIAL_RE = re.compile(
    r"^v?(\d+|[xX*])(?:\.(\d+|[xX*]))?(?:\.(\d+|[xX*]))?"
    rf"(?:-({_IDENT}(?:\.{_IDENT})*))?"
    rf"(?:\+({_IDENT}(?:\.{_IDENT})*))?$"
)
OPERATOR_RE = re.compile(r"^(>=|<=|!=|~>|>|<|=|\^|~)?(.*)$")
HYPHEN_RE = re.compile(r"^\s*(\S+)\s+-\s+(\S+)\s*$")


def parse_version(text: str) -> Version:
    """Parse an exact ``MAJOR.MINOR.PATCH[-PRE][+BUILD]`` version."""
    match = VERSION_RE.match(text.strip()) if text else None
    if not match:
        raise ParseError(f"{text!r} is not a valid version")
    major, minor, patch, pre, build = match.groups()
    for ident in (pre or "").split("."):
        if len(ident) > 1 and ident.isdigit() and ident.startswith("0"):
            raise ParseError(f"{text!r} is not a valid version (leading zero in prerelease)")
    return Version(major=int(major), minor=int(minor), patch=int(patch),
                   prerelease=pre or "", build=build or "")


class Comparator(NamedTuple):
    op: str
    version: Version

    def test(self, version: Version) -> bool:
        a, b = version.precedence_key(), self.version.precedence_key()
        if self.op == "=":
            return a == b
        if self.op == "!=":
            return a != b
        if self.op == ">":
            return a > b
        if self.op == ">=":
            return a >= b
        if self.op == "<":
            return a < b
        return a <= b

    def __str__(self) -> str:
        return f"{self.op}{self.version}"


class Range:
    """A set of ``||`` alternatives, each an AND of comparators."""

    def __init__(self, text: str, alternatives: List[List[Comparator]]):
        self.text = text
        self.alternatives = alternatives

    def contains(self, version: Version) -> bool:
        return any(self._satisfies(alt, version) for alt in self.alternatives)

    __contains__ = contains

    @staticmethod
    def _satisfies(comparators: List[Comparator], version: Version) -> bool:
        if not all(c.test(version) for c in comparators):
            return False
        if not version.prerelease:
            return True
        # prereleases only match when the range names one on the same release
        return any(
            c.version.prerelease and c.version.release_tuple() == version.release_tuple()
            for c in comparators
        )

    def __str__(self) -> str:
        return " || ".join(" ".join(str(c) for c in alt) for alt in self.alternatives)

    def __repr__(self) -> str:
        return f"Range({self.text!r})"


_Partial = Tuple[Optional[int], Optional[int], Optional[int], str, str]


def _parse_partial(text: str, selector: str) -> _Partial:
    match = PARTIAL_RE.match(text)
    if not match:
        raise ParseError(f"{selector!r} is not a valid range")
    parts: List[Optional[int]] = []
    for raw in match.groups()[:3]:
        # anything after a wildcard is a wildcard too
        if raw is None or raw in ("x", "X", "*") or (parts and parts[-1] is None):
            parts.append(None)
        else:
            parts.append(int(raw))
    return parts[0], parts[1], parts[2], match.group(4) or "", match.group(5) or ""


def _v(major: int, minor: int = 0, patch: int = 0, pre: str = "", build: str = "") -> Version:
    return Version(major=major, minor=minor, patch=patch, prerelease=pre, build=build)


def _floor(p: _Partial) -> Version:
    major, minor, patch, pre, build = p
    return _v(major or 0, minor or 0, patch or 0, pre, build)


def _next_up(p: _Partial) -> Version:
    """Smallest version above every version the partial names."""
    major, minor, _, _, _ = p
    if minor is None:
        return _v(major + 1)
    return _v(major, minor + 1)


def _expand(op: str, text: str, selector: str) -> List[Comparator]:
    partial = _parse_partial(text, selector)
    major, minor, patch, pre, _ = partial
    exact = patch is not None

    if major is None:
        if op in ("<", ">", "!="):
            raise ParseError(f"{selector!r} is not a valid range")
        return [Comparator(">=", _v(0))]

    if op in ("", "="):
        if exact:
            return [Comparator("=", _floor(partial))]
        return [Comparator(">=", _floor(partial)), Comparator("<", _next_up(partial))]
    if op == "!=":
        if not exact:
            raise ParseError(f"{selector!r}: != needs a full version")
        return [Comparator("!=", _floor(partial))]
    if op == ">":
        if exact:
            return [Comparator(">", _floor(partial))]
        return [Comparator(">=", _next_up(partial))]
    if op == ">=":
        return [Comparator(">=", _floor(partial))]
    if op == "<":
        return [Comparator("<", _floor(partial))]
    if op == "<=":
        if exact:
            return [Comparator("<=", _floor(partial))]
        return [Comparator("<", _next_up(partial))]
    if op == "^":
        if major > 0 or minor is None:
            upper = _v(major + 1)
        elif minor > 0 or patch is None:
            upper = _v(0, minor + 1)
        else:
            upper = _v(0, 0, patch + 1)
        return [Comparator(">=", _floor(partial)), Comparator("<", upper)]
    # ~ and ~>
    upper = _v(major + 1) if minor is None else _v(major, minor + 1)
    return [Comparator(">=", _floor(partial)), Comparator("<", upper)]


def _parse_alternative(text: str, selector: str) -> List[Comparator]:
    hyphen = HYPHEN_RE.match(text)
    if hyphen:
        low = _parse_partial(hyphen.group(1), selector)
        high = _parse_partial(hyphen.group(2), selector)
        comparators = [Comparator(">=", _floor(low))]
        if high[0] is None:
            return comparators
        if high[2] is not None:
            comparators.append(Comparator("<=", _floor(high)))
        else:
            comparators.append(Comparator("<", _next_up(high)))
        return comparators

    # allow "> 1.8" as well as ">1.8"
    text = re.sub(r"(>=|<=|!=|~>|[<>=~^])\s+", r"\1", text)
    tokens = [t for t in re.split(r"[\s,]+", text) if t]
    if not tokens:
        raise ParseError(f"{selector!r} is not a valid range")
    comparators: List[Comparator] = []
    for token in tokens:
        op, rest = OPERATOR_RE.match(token).groups()
        if not rest:
            raise ParseError(f"{selector!r} is not a valid range")
        comparators.extend(_expand(op or "", rest, selector))
    return comparators


def parse_range(selector: str) -> Range:
    """Parse a range expression such as ``^1.8.0``, ``~1.8`` or ``>=1.7 <9 || 11.x``."""
    if not selector or not selector.strip():
        raise ParseError("empty range")
    alternatives = [_parse_alternative(part, selector) for part in selector.split("||")]
    return Range(selector, alternatives)

"""Tests for version and range parsing."""

import itertools

import pytest

from jdkup.errors import ParseError, ResolutionError
from jdkup.versions import parse_range, parse_version, select_version


@pytest.mark.parametrize("text", [
    "1.8.0",
    "0.0.1",
    "11.0.2",
    "1.2.3-alpha.1",
    "1.2.3+build.5",
    "10.20.30-rc.1+exp.sha.5114f85",
])
def test_version_round_trip(text):
    version = parse_version(text)
    assert str(version) == text
    assert parse_version(str(version)) == version


@pytest.mark.parametrize("text", ["", "1.8", "01.2.3", "1.2.3-01", "v1.2.3", "1.2.3.4", "abc", "1.2.x"])
def test_invalid_version(text):
    with pytest.raises(ParseError):
        parse_version(text)


def test_prerelease_precedence():
    ordered = [
        "1.0.0-alpha", "1.0.0-alpha.1", "1.0.0-alpha.beta", "1.0.0-beta",
        "1.0.0-beta.2", "1.0.0-beta.11", "1.0.0-rc.1", "1.0.0", "1.0.1", "1.10.0", "2.0.0",
    ]
    versions = [parse_version(v) for v in ordered]
    assert sorted(reversed(versions)) == versions


def test_total_order():
    versions = [parse_version(v) for v in
                ["1.8.0", "1.8.1", "9.0.0", "1.8.0-rc.1", "1.8.0+b1", "1.8.0+b2", "0.9.9"]]
    for a, b in itertools.product(versions, repeat=2):
        assert [a < b, a == b, a > b].count(True) == 1
        assert a.compare(b) == -b.compare(a)


def test_build_metadata_counts_for_equality():
    plain, built = parse_version("1.8.0"), parse_version("1.8.0+b1")
    assert plain != built
    assert plain < built
    assert plain.precedence_key() == built.precedence_key()
    assert len({parse_version("1.8.0"), plain, built}) == 2


def test_descending_scan_matches_ascending_backward_scan():
    rng = parse_range("~1.8")
    versions = [parse_version(v) for v in ["1.8.3", "1.7.0", "1.8.10", "9.0.0", "1.8.0"]]
    forward = next(v for v in sorted(versions, reverse=True) if rng.contains(v))
    backward = next(v for v in reversed(sorted(versions)) if rng.contains(v))
    assert forward == backward == parse_version("1.8.10")


@pytest.mark.parametrize("selector,version,expected", [
    ("^1.8.0", "1.9.3", True),
    ("^1.8.0", "1.8.0", True),
    ("^1.8.0", "2.0.0", False),
    ("^1.8.0", "1.7.9", False),
    ("^0.2.3", "0.2.9", True),
    ("^0.2.3", "0.3.0", False),
    ("^0.0.3", "0.0.4", False),
    ("^1.8", "1.99.0", True),
    ("~1.8.0", "1.8.9", True),
    ("~1.8.0", "1.9.0", False),
    ("~>1.8", "1.8.2", True),
    ("~1", "1.9.0", True),
    ("~1", "2.0.0", False),
    ("1.8", "1.8.5", True),
    ("1.8", "1.9.0", False),
    ("1.8.x", "1.8.0", True),
    ("1.x", "1.99.0", True),
    ("*", "12.0.0", True),
    ("1.8.0", "1.8.0", True),
    ("=1.8.0", "1.8.1", False),
    (">=1.7 <9", "8.0.0", True),
    (">=1.7 <9", "9.0.0", False),
    (">=1.8.0, <2", "1.9.0", True),
    ("> 1.8.0", "1.8.1", True),
    (">1.8", "1.8.5", False),
    (">1.8", "1.9.0", True),
    ("<=1.8", "1.8.9", True),
    ("<=1.8.0", "1.8.1", False),
    ("!=1.8.0", "1.8.1", True),
    ("!=1.8.0", "1.8.0", False),
    ("1.7 - 1.8", "1.8.9", True),
    ("1.7 - 1.8.0", "1.8.1", False),
    ("<1.8 || >=11", "11.0.2", True),
    ("<1.8 || >=11", "9.0.0", False),
    ("^1.8.0", "1.9.0-beta", False),
    ("^1.9.0-beta", "1.9.0-beta.2", True),
    ("^1.9.0-beta", "1.10.0-beta", False),
])
def test_range_contains(selector, version, expected):
    rng = parse_range(selector)
    assert rng.contains(parse_version(version)) is expected
    assert (parse_version(version) in rng) is expected


@pytest.mark.parametrize("selector", ["", "   ", "abc", ">", "^", "1.2.3.4", "!=1.8", ">=1.8 ||"])
def test_invalid_range(selector):
    with pytest.raises(ParseError):
        parse_range(selector)


def test_select_newest_match():
    catalog = {parse_version(v): f"tgz+http://example.com/{v}.tgz" for v in ["1.8.0", "1.8.1", "9.0.0"]}
    assert select_version(parse_range("^1.8.0"), catalog) == parse_version("1.8.1")


def test_select_lists_candidates_when_nothing_matches():
    catalog = {parse_version(v): "tgz+http://example.com/x.tgz" for v in ["1.8.0", "1.8.1", "9.0.0"]}
    with pytest.raises(ResolutionError) as exc_info:
        select_version(parse_range("^11"), catalog)
    assert exc_info.value.candidates == ["9.0.0", "1.8.1", "1.8.0"]
    assert "Valid install targets: 9.0.0, 1.8.1, 1.8.0" in str(exc_info.value)

from __future__ import annotations

from codeowners_filter.matching import contains, matches, normalize_pattern, wildcard_base


def test_exact_and_directory_prefix() -> None:
    assert matches("src/app.ts", "src/app.ts")
    assert matches("src/a/b.ts", "src")
    assert matches("src/a/b.ts", "/src/")
    assert not matches("srcfoo/b.ts", "src")
    assert not matches("src", "src/a")


def test_single_level_wildcard() -> None:
    assert matches("a/b", "a/*")
    assert not matches("a/b/c", "a/*")
    assert not matches("a", "a/*")


def test_recursive_wildcard() -> None:
    assert matches("a/b", "a/**")
    assert matches("a/b/c/d", "a/**")
    assert not matches("ab/c", "a/**")


def test_mid_pattern_wildcards() -> None:
    assert matches("src/pkg/test", "src/*/test")
    assert matches("src/pkg/test/unit.ts", "src/*/test")
    assert not matches("src/a/b/test", "src/*/test")
    assert matches("src/a/b/test", "src/**/test")
    assert matches("src/test", "src/**/test")
    assert matches("src/app.ts", "src/*.ts")
    assert not matches("src/lib/app.ts", "src/*.ts")


def test_dot_is_literal() -> None:
    assert matches("src/a.ts", "src/*.ts")
    assert not matches("src/axts", "src/*.ts")


def test_unanchored_wildcard_matches_at_any_depth() -> None:
    assert matches("a.ts", "*.ts")
    assert matches("src/deep/a.ts", "*.ts")
    assert not matches("src/a.js", "*.ts")


def test_matches_is_repeatable() -> None:
    results = {matches("src/x/y.py", "src/**/y.py") for _ in range(3)}
    assert results == {True}


def test_contains_uses_the_same_matcher() -> None:
    assert contains("docs", "docs/api")
    assert contains("docs", "docs")
    assert contains("src/**", "src/*.ts")
    assert not contains("docs/api", "docs")
    assert not contains("src", "srcfoo")


def test_normalize_pattern_and_wildcard_base() -> None:
    assert normalize_pattern("/docs/") == "docs"
    assert wildcard_base("src/*.ts") == ("src", False)
    assert wildcard_base("src/**") == ("src", True)
    assert wildcard_base("src/*/test") == ("src", True)
    assert wildcard_base("*.md") == ("", True)

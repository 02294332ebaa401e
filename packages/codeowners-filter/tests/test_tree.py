from __future__ import annotations

import logging
from pathlib import Path

from codeowners_filter.fs import LocalFileSystem
from codeowners_filter.resolver import resolve
from codeowners_filter.rules import parse_rules
from codeowners_filter.tree import PathNode, build_tree, expand_patterns, nodes_from_paths


def _write_repo(root: Path, files: list[str], codeowners: str) -> LocalFileSystem:
    for rel in files:
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(f"// {rel}\n", encoding="utf-8")
    co = root / ".github" / "CODEOWNERS"
    co.parent.mkdir(parents=True, exist_ok=True)
    co.write_text(codeowners, encoding="utf-8")
    return LocalFileSystem(root)


def _tree_for(fs: LocalFileSystem, codeowners: str, owner: str) -> list[PathNode]:
    index = resolve(parse_rules(codeowners))
    return build_tree(index.patterns_for(owner), index, owner, fs)


def _flatten(nodes: list[PathNode]) -> dict[str, PathNode]:
    out: dict[str, PathNode] = {}
    for node in nodes:
        out[node.full_path] = node
        out.update(_flatten(node.children))
    return out


def _assert_sorted(nodes: list[PathNode]) -> None:
    kinds = [n.is_file for n in nodes]
    assert kinds == sorted(kinds)
    for is_file in (False, True):
        labels = [n.label.casefold() for n in nodes if n.is_file is is_file]
        assert labels == sorted(labels)
    for node in nodes:
        _assert_sorted(node.children)


def test_unanchored_wildcard_owns_matching_files_only(tmp_path: Path) -> None:
    codeowners = "*.ts @ts-owners\n"
    fs = _write_repo(tmp_path, ["src/a.ts", "src/b.js"], codeowners)

    nodes = _flatten(_tree_for(fs, codeowners, "@ts-owners"))

    assert nodes["src/a.ts"].is_directly_owned is True
    assert nodes["src/a.ts"].is_file is True
    assert nodes["src"].is_directly_owned is False
    assert "src/b.js" not in nodes


def test_directory_owner_loses_overridden_subtree(tmp_path: Path) -> None:
    codeowners = "src @teamA\nsrc/sub @teamB\n"
    fs = _write_repo(
        tmp_path,
        ["src/a.ts", "src/sub/b.ts", "src/sub/deep/c.ts"],
        codeowners,
    )

    team_a = _flatten(_tree_for(fs, codeowners, "@teamA"))
    assert sorted(team_a) == ["src", "src/a.ts"]
    assert team_a["src"].is_directly_owned is True
    assert team_a["src"].is_file is False

    team_b = _tree_for(fs, codeowners, "@teamB")
    assert [n.full_path for n in team_b] == ["src"]
    assert team_b[0].is_directly_owned is False
    sub = team_b[0].children[0]
    assert sub.full_path == "src/sub"
    assert sub.is_directly_owned is True
    assert [c.label for c in sub.children] == ["deep", "b.ts"]


def test_wildcard_override_is_applied_per_path(tmp_path: Path) -> None:
    codeowners = "src/** @a\nsrc/*.ts @b\n"
    fs = _write_repo(tmp_path, ["src/x.ts", "src/y.js", "src/lib/z.ts"], codeowners)

    owned_by_a = _flatten(_tree_for(fs, codeowners, "@a"))
    assert "src/x.ts" not in owned_by_a
    assert owned_by_a["src/y.js"].is_directly_owned is True
    assert owned_by_a["src/lib/z.ts"].is_directly_owned is True

    owned_by_b = _flatten(_tree_for(fs, codeowners, "@b"))
    assert owned_by_b["src/x.ts"].is_directly_owned is True
    assert "src/y.js" not in owned_by_b


def test_single_level_wildcard_expands_direct_children(tmp_path: Path) -> None:
    fs = _write_repo(tmp_path, ["docs/a.md", "docs/b.md", "docs/api/c.md"], "")

    paths = expand_patterns(["docs/*"], fs)

    assert paths == ["docs", "docs/a.md", "docs/b.md"]


def test_children_sorted_directories_first(tmp_path: Path) -> None:
    codeowners = "pkg @a\n"
    fs = _write_repo(
        tmp_path,
        ["pkg/zeta.py", "pkg/Alpha.py", "pkg/beta/x.py", "pkg/Core/y.py", "pkg/a.py"],
        codeowners,
    )

    roots = _tree_for(fs, codeowners, "@a")

    _assert_sorted(roots)
    assert [c.label for c in roots[0].children] == [
        "beta",
        "Core",
        "a.py",
        "Alpha.py",
        "zeta.py",
    ]


def test_tree_has_unique_full_paths_and_is_repeatable(tmp_path: Path) -> None:
    codeowners = "src @a\nsrc/lib/ @a\nsrc/lib/util.py @a\n"
    fs = _write_repo(tmp_path, ["src/lib/util.py", "src/main.py"], codeowners)

    first = _tree_for(fs, codeowners, "@a")
    second = _tree_for(fs, codeowners, "@a")

    seen: list[str] = []

    def walk(nodes: list[PathNode]) -> None:
        for n in nodes:
            seen.append(n.full_path)
            walk(n.children)

    walk(first)
    assert len(seen) == len(set(seen))
    assert [n.model_dump() for n in first] == [n.model_dump() for n in second]


def test_missing_literal_paths_still_produce_nodes(tmp_path: Path) -> None:
    fs = LocalFileSystem(tmp_path)
    nodes = nodes_from_paths(["ghost/dir/file.txt"], fs)

    assert nodes[0].full_path == "ghost"
    leaf = nodes[0].children[0].children[0]
    assert leaf.full_path == "ghost/dir/file.txt"
    assert leaf.is_directly_owned is True
    assert leaf.is_file is False


class _DeniedFileSystem(LocalFileSystem):
    def __init__(self, root: Path, denied: str) -> None:
        super().__init__(root)
        self.denied = denied

    def is_file(self, path: str) -> bool:
        if path == self.denied:
            raise PermissionError(13, "Permission denied", path)
        return super().is_file(path)


def test_unstatable_paths_are_skipped(tmp_path: Path, caplog) -> None:
    _write_repo(tmp_path, ["src/ok.py", "src/secret.py"], "")
    fs = _DeniedFileSystem(tmp_path, "src/secret.py")
    index = resolve(parse_rules("src @a\n"))

    with caplog.at_level(logging.WARNING, logger="codeowners_filter.tree"):
        nodes = _flatten(build_tree(["src"], index, "@a", fs))

    assert "src/ok.py" in nodes
    assert "src/secret.py" not in nodes
    assert "skipping src/secret.py" in caplog.text


def test_empty_rules_build_empty_tree(tmp_path: Path) -> None:
    fs = _write_repo(tmp_path, ["src/a.py"], "")
    assert _tree_for(fs, "", "@anyone") == []


def test_wildcard_rule_outranks_literal_directory(tmp_path: Path) -> None:
    codeowners = "src @a\nsrc/*.ts @b\n"
    fs = _write_repo(tmp_path, ["src/x.ts", "src/y.py"], codeowners)

    owned_by_a = _flatten(_tree_for(fs, codeowners, "@a"))
    assert sorted(owned_by_a) == ["src", "src/y.py"]

    owned_by_b = _flatten(_tree_for(fs, codeowners, "@b"))
    assert owned_by_b["src/x.ts"].is_directly_owned is True
    assert owned_by_b["src"].is_directly_owned is False
    assert "src/y.py" not in owned_by_b


def test_traversal_pattern_is_skipped(tmp_path: Path, caplog) -> None:
    codeowners = "../outside @a\nsrc @a\n../*.ts @a\n"
    fs = _write_repo(tmp_path, ["src/a.py"], codeowners)

    with caplog.at_level(logging.WARNING, logger="codeowners_filter.tree"):
        nodes = _flatten(_tree_for(fs, codeowners, "@a"))

    assert sorted(nodes) == ["src", "src/a.py"]
    assert "skipping ../outside" in caplog.text

"""Tests for building the folder forest from flat rows."""

import logging
import random
from types import SimpleNamespace

from tabloom.services.folder_tree import build_folder_tree, index_forest


def row(id, parent_id=None, sort_order=0, name=None):
    return SimpleNamespace(id=id, name=name or id, parent_id=parent_id, sort_order=sort_order)


def all_ids(forest):
    return sorted(index_forest(forest))


def assert_sorted(forest):
    assert [n.sort_order for n in forest] == sorted(n.sort_order for n in forest)
    for node in index_forest(forest).values():
        orders = [c.sort_order for c in node.children]
        assert orders == sorted(orders)


class TestBuildFolderTree:

    def test_nests_children_under_parents(self):
        forest = build_folder_tree([row("F1", name="Dev"), row("F2", "F1", name="JS")])
        assert [n.id for n in forest] == ["F1"]
        assert [c.id for c in forest[0].children] == ["F2"]
        assert forest[0].children[0].children == []

    def test_missing_parent_becomes_root(self):
        forest = build_folder_tree([row("A"), row("B", parent_id="deleted-folder")])
        assert sorted(n.id for n in forest) == ["A", "B"]

    def test_siblings_sorted_by_sort_order(self):
        forest = build_folder_tree([
            row("root"),
            row("c", "root", 2),
            row("a", "root", 0),
            row("b", "root", 1),
            row("top-late", None, -1),
        ])
        assert [n.id for n in forest] == ["top-late", "root"]
        assert [c.id for c in forest[1].children] == ["a", "b", "c"]

    def test_ties_keep_input_order(self):
        forest = build_folder_tree([row("x"), row("y"), row("z")])
        assert [n.id for n in forest] == ["x", "y", "z"]

    def test_every_folder_appears_once_in_random_acyclic_sets(self):
        rng = random.Random(42)
        for _ in range(25):
            rows = []
            for i in range(40):
                parent = f"f{rng.randrange(i)}" if i and rng.random() < 0.7 else None
                rows.append(row(f"f{i}", parent, rng.randrange(5)))
            rng.shuffle(rows)
            forest = build_folder_tree(rows)
            seen = []
            stack = list(forest)
            while stack:
                node = stack.pop()
                seen.append(node.id)
                stack.extend(node.children)
            assert sorted(seen) == sorted(r.id for r in rows)
            assert_sorted(forest)

    def test_deep_chain_does_not_hit_recursion_limit(self):
        depth = 5000
        rows = [row("n0")] + [row(f"n{i}", f"n{i - 1}") for i in range(1, depth)]
        forest = build_folder_tree(rows)
        assert len(index_forest(forest)) == depth

    def test_empty_input(self):
        assert build_folder_tree([]) == []


class TestCycleBreaking:

    def test_two_node_cycle_keeps_both_folders(self, caplog):
        with caplog.at_level(logging.WARNING):
            forest = build_folder_tree([row("A", "B"), row("B", "A")])
        # First arrival loses its parent link
        assert [n.id for n in forest] == ["A"]
        assert [c.id for c in forest[0].children] == ["B"]
        assert "cycle" in caplog.text

    def test_self_parent_becomes_root(self):
        forest = build_folder_tree([row("A", "A")])
        assert [n.id for n in forest] == ["A"]

    def test_cycle_with_tail(self):
        rows = [row("tail", "C"), row("C", "D"), row("D", "E"), row("E", "C")]
        forest = build_folder_tree(rows)
        assert all_ids(forest) == ["C", "D", "E", "tail"]
        assert [n.id for n in forest] == ["C"]

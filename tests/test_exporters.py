"""Tests for exporters."""

import json

import pytest

from exporters.ascii_exporter import to_ascii
from exporters.json_exporter import load_shallow_json, to_json
from graph.deep import resolve_all
from graph.model import RawFileRecord, ShallowNode


BASE = "/repo/WebContent"


def page(name, *nested):
    return ShallowNode(
        name=name,
        path=f"{BASE}/{name}",
        nested=tuple(f"{BASE}/{n}" for n in nested),
    )


class TestJSONExporter:
    """Tests for JSON exporter."""

    def test_empty(self):
        """Test exporting nothing."""
        assert json.loads(to_json([])) == []

    def test_raw_records(self):
        """Test exporting discovered pages."""
        record = RawFileRecord(path=f"{BASE}/a.jsp", root=BASE, name="a.jsp", size=3)

        data = json.loads(to_json([record]))

        assert data == [{
            "name": "a.jsp",
            "path": f"{BASE}/a.jsp",
            "root": BASE,
            "size": 3,
            "modified": None,
        }]

    def test_shallow_nodes(self):
        """Test exporting shallow nodes keeps reference order."""
        data = json.loads(to_json([page("a.jsp", "c.jsp", "b.jsp")]))

        assert data[0]["nested"] == [f"{BASE}/c.jsp", f"{BASE}/b.jsp"]
        assert data[0]["depth"] == 0
        assert data[0]["parent"] is None

    def test_deep_nodes_with_cycle(self):
        """Test that circular occurrences carry their marker and raw references."""
        trees = resolve_all([page("a.jsp", "b.jsp"), page("b.jsp", "a.jsp")])

        data = json.loads(to_json(trees))

        again = data[0]["nested"][0]["nested"][0]
        assert again["path"] == f"{BASE}/a.jsp"
        assert again["nested"] == []
        assert again["rawNested"] == [f"{BASE}/b.jsp"]
        assert again["circular"] == {
            "firstIncludedDepth": 0,
            "lastIncludedBy": {"path": f"{BASE}/b.jsp", "depth": 1},
        }

    def test_load_shallow_json(self):
        """Test reading back a shallow export."""
        nodes = [page("a.jsp", "b.jsp"), page("b.jsp")]

        assert load_shallow_json(to_json(nodes)) == nodes

    def test_load_shallow_json_rejects_non_array(self):
        with pytest.raises(ValueError):
            load_shallow_json('{"nodes": []}')

    def test_load_shallow_json_rejects_bad_node(self):
        with pytest.raises(ValueError):
            load_shallow_json('[{"name": "a.jsp"}]')


class TestASCIIExporter:
    """Tests for ASCII exporter."""

    def test_empty(self):
        """Test exporting no trees."""
        assert to_ascii([]) == ""

    def test_simple_tree(self):
        """Test simple tree structure."""
        trees = resolve_all([page("a.jsp", "b.jsp", "c.jsp"), page("b.jsp"), page("c.jsp")])

        output = to_ascii(trees[:1], base=BASE)

        assert output.splitlines() == [
            "a.jsp",
            "├── b.jsp",
            "└── c.jsp",
        ]

    def test_nested_prefixes(self):
        """Test vertical guides under a non-last child."""
        trees = resolve_all([page("a.jsp", "b.jsp", "c.jsp"), page("b.jsp", "d.jsp"),
                             page("c.jsp"), page("d.jsp")])

        output = to_ascii(trees[:1], base=BASE, style="ascii")

        assert output.splitlines() == [
            "a.jsp",
            "|-- b.jsp",
            "|   \\-- d.jsp",
            "\\-- c.jsp",
        ]

    def test_ascii_style(self):
        """Test pure ASCII tree style."""
        trees = resolve_all([page("a.jsp", "b.jsp"), page("b.jsp")])

        output = to_ascii(trees, base=BASE, style="ascii")

        assert "├" not in output
        assert "└" not in output
        assert "│" not in output

    def test_circular_marker(self):
        """Test that circular occurrences are labelled."""
        trees = resolve_all([page("a.jsp", "b.jsp"), page("b.jsp", "a.jsp")])

        output = to_ascii(trees[:1], base=BASE)

        assert "a.jsp [circular: first included at depth 0 by b.jsp]" in output

    def test_hide_leaves(self):
        """Test skipping top-level pages that include nothing."""
        trees = resolve_all([page("a.jsp", "b.jsp"), page("b.jsp")])

        output = to_ascii(trees, base=BASE, show_leaves=False)

        assert output.splitlines() == ["a.jsp", "└── b.jsp"]

    def test_paths_outside_base(self):
        """Test that paths outside the base are shown in full."""
        trees = resolve_all([page("a.jsp")])

        assert to_ascii(trees, base="/elsewhere") == f"{BASE}/a.jsp"

# tests/runtime/test_registries.py
import json

import networkx as nx
import pytest

from street_lookup.config.models import (
    GraphByPath,
    PrefixIndexSortedModel,
    PrefixIndexTrieModel,
    SpatialIndexBruteForceModel,
    SpatialIndexKDTreeModel,
)
from street_lookup.domain.entities.geography import Point
from street_lookup.domain.graphs import NetworkXLocationGraph
from street_lookup.domain.indexes.prefix_indexes import SortedPrefixIndex, TrieSet
from street_lookup.domain.indexes.spatial_indexes import BruteForceSpatialIndex, KDTreeSpatialIndex
from street_lookup.runtime.registries import (
    make_prefix_index,
    make_spatial_index,
    register_spatial_index,
    resolve_graph,
)
from street_lookup.runtime.resources import load_graph_from_path


def test_spatial_factories():
    pts = [Point(0.0, 0.0), Point(2.0, 2.0)]
    kd = make_spatial_index(SpatialIndexKDTreeModel(leafsize=4))(pts)
    bf = make_spatial_index(SpatialIndexBruteForceModel())(pts)
    assert isinstance(kd, KDTreeSpatialIndex) and isinstance(bf, BruteForceSpatialIndex)
    assert kd.nearest(1.8, 1.9) == bf.nearest(1.8, 1.9) == Point(2.0, 2.0)


def test_prefix_factories_return_fresh_indices():
    make_trie = make_prefix_index(PrefixIndexTrieModel())
    a, b = make_trie(), make_trie()
    a.add("oak")
    assert isinstance(a, TrieSet) and len(b) == 0
    assert isinstance(make_prefix_index(PrefixIndexSortedModel())(), SortedPrefixIndex)


def test_unknown_kind_is_a_value_error():
    class _Fake:
        kind = "quadtree"

    with pytest.raises(ValueError):
        make_spatial_index(_Fake())
    with pytest.raises(ValueError):
        make_prefix_index(_Fake())


def test_custom_spatial_index_can_be_registered():
    class _Fixed:
        kind = "always_origin"

    @register_spatial_index("always_origin")
    def _make(cfg, deps):
        return lambda points: BruteForceSpatialIndex([Point(0.0, 0.0)])

    idx = make_spatial_index(_Fixed())([Point(5.0, 5.0)])
    assert idx.nearest(5.0, 5.0) == Point(0.0, 0.0)


def test_resolve_graph_prefers_prebuilt_when_no_ref():
    G = nx.Graph()
    G.add_node(7, x=1.0, y=2.0)
    g = resolve_graph(None, deps={"graph": G})
    assert isinstance(g, NetworkXLocationGraph)
    assert [v.id for v in g.all_vertices()] == [7]
    with pytest.raises(ValueError):
        resolve_graph(None, deps={})


def test_json_node_link_graph(tmp_path):
    data = {
        "directed": False,
        "multigraph": False,
        "graph": {},
        "nodes": [
            {"id": 1, "x": 0.0, "y": 0.0, "name": "Elm St"},
            {"id": 2, "x": 1.0, "y": 1.0},
        ],
        "links": [{"source": 1, "target": 2}],
    }
    f = tmp_path / "g.json"
    f.write_text(json.dumps(data), encoding="utf-8")
    g = resolve_graph(GraphByPath(file=str(f), fmt="json"), deps={})
    assert g.has_edges(1) and g.has_edges(2)
    assert [v.name for v in g.all_vertices()] == ["Elm St", None]


def test_unsupported_format(tmp_path):
    with pytest.raises(ValueError):
        load_graph_from_path(str(tmp_path / "g.osm"), "osm")


def test_vertex_without_coordinates_is_reported():
    G = nx.Graph()
    G.add_node(5, x=1.0)
    g = NetworkXLocationGraph(G)
    with pytest.raises(KeyError, match="'y'"):
        list(g.all_vertices())


def test_graphml_string_coordinates_are_coerced():
    G = nx.Graph()
    G.add_node(9, x="-71.05", y="42.36", name="State St")
    [v] = NetworkXLocationGraph(G).all_vertices()
    assert (v.lon, v.lat, v.name) == (-71.05, 42.36, "State St")

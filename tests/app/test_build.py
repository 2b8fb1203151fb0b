# tests/app/test_build.py
import pickle

import networkx as nx
import pytest
from pydantic import ValidationError

from street_lookup.app.build import build
from street_lookup.domain.indexes.prefix_indexes import SortedPrefixIndex
from street_lookup.domain.indexes.spatial_indexes import BruteForceSpatialIndex, EmptyIndexError


def _street_graph() -> nx.MultiDiGraph:
    # osmnx-shaped: x/y node attributes, names on a couple of nodes
    G = nx.MultiDiGraph()
    G.add_node(101, x=-122.2585, y=37.8719, name="Sather Gate")
    G.add_node(102, x=-122.2590, y=37.8700)
    G.add_node(103, x=-122.2680, y=37.8702, name="Shattuck Ave")
    G.add_node(104, x=-122.3000, y=37.9000, name="Shattuck Square")  # isolated
    G.add_edge(101, 102, length=210.0)
    G.add_edge(102, 103, length=790.0)
    return G


def test_build_from_prebuilt_graph():
    app = build({"name": "test"}, graph=_street_graph(), use_logging=False)
    assert app.lookup.closest(-122.2586, 37.8718) == 101
    assert app.lookup.closest(-122.3, 37.9) == 103
    assert sorted(app.lookup.locations_by_prefix("shat")) == ["Shattuck Ave", "Shattuck Square"]


def test_build_from_pickle(tmp_path):
    f = tmp_path / "graph.pkl"
    with open(f, "wb") as fp:
        pickle.dump(_street_graph(), fp)
    cfg = {
        "name": "pickle",
        "graph": {"file": str(f), "fmt": "pickle"},
        "spatial_index": {"kind": "brute_force"},
        "prefix_index": {"kind": "sorted"},
    }
    app = build(cfg, use_logging=False)
    assert isinstance(app.lookup._spatial, BruteForceSpatialIndex)
    assert isinstance(app.lookup._names, SortedPrefixIndex)
    assert app.lookup.closest(-122.2681, 37.8703) == 103
    assert [r.id for r in app.lookup.locations_by_exact_name("sather gate")] == [101]


def test_build_from_graphml(tmp_path):
    f = tmp_path / "graph.graphml"
    nx.write_graphml(_street_graph(), f)
    app = build({"graph": {"file": str(f), "fmt": "graphml"}}, use_logging=False)
    assert app.lookup.closest(-122.2590, 37.8700) == 102
    [rec] = app.lookup.locations_by_exact_name("Shattuck Ave")
    assert rec.as_dict() == {"lat": 37.8702, "lon": -122.268, "name": "Shattuck Ave", "id": 103}


def test_build_with_custom_attribute_names(tmp_path):
    G = nx.Graph()
    G.add_node(1, lon=10.0, lat=20.0, label="Market St")
    G.add_node(2, lon=11.0, lat=21.0)
    G.add_edge(1, 2)
    f = tmp_path / "g.pkl"
    f.write_bytes(pickle.dumps(G))
    cfg = {
        "graph": {
            "file": str(f),
            "fmt": "pickle",
            "lon_attr": "lon",
            "lat_attr": "lat",
            "name_attr": "label",
        }
    }
    app = build(cfg, use_logging=False)
    assert app.lookup.closest(10.1, 20.1) == 1
    assert app.lookup.locations_by_prefix("mark") == ["Market St"]


def test_missing_graph_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        build({"graph": {"file": str(tmp_path / "nope.pkl")}}, use_logging=False)


def test_optional_graph_file_builds_empty_indices(tmp_path):
    cfg = {"graph": {"file": str(tmp_path / "nope.pkl"), "must_exist": False}}
    app = build(cfg, use_logging=False)
    assert app.lookup.n_points == 0
    assert app.lookup.locations_by_prefix("") == []
    with pytest.raises(EmptyIndexError):
        app.lookup.closest(0.0, 0.0)


def test_no_graph_at_all():
    with pytest.raises(ValueError):
        build({"name": "empty"}, use_logging=False)


def test_config_is_validated():
    with pytest.raises(ValidationError):
        build({"spatial_index": {"kind": "rtree"}}, graph=_street_graph(), use_logging=False)
    with pytest.raises(ValidationError):
        build({"duplicate_points": "merge"}, graph=_street_graph(), use_logging=False)
    with pytest.raises(ValidationError):
        build({"surprise": 1}, graph=_street_graph(), use_logging=False)

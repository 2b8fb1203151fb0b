# runtime/registries.py
import os
from collections.abc import Callable
from functools import partial
from typing import Any

import networkx as nx

from street_lookup.app.protocols import PrefixIndexFactory, SpatialIndexFactory
from street_lookup.config.models import (
    GraphByPath,
    PrefixIndexSortedModel,
    PrefixIndexTrieModel,
    PrefixIndexUnion,
    SpatialIndexBruteForceModel,
    SpatialIndexKDTreeModel,
    SpatialIndexUnion,
)
from street_lookup.domain.graphs import NetworkXLocationGraph
from street_lookup.domain.indexes.prefix_indexes import SortedPrefixIndex, TrieSet
from street_lookup.domain.indexes.spatial_indexes import (
    BruteForceSpatialIndex,
    KDTreeSpatialIndex,
)
from street_lookup.runtime.resources import load_graph_from_path

SpatialFactoryMaker = Callable[[SpatialIndexUnion, dict], SpatialIndexFactory]
PrefixFactoryMaker = Callable[[PrefixIndexUnion, dict], PrefixIndexFactory]

_spatial_registry: dict[str, SpatialFactoryMaker] = {}
_prefix_registry: dict[str, PrefixFactoryMaker] = {}


# ------------------- Spatial index registry ---------------------------


def register_spatial_index(kind: str):
    def deco(fn: SpatialFactoryMaker):
        _spatial_registry[kind] = fn
        return fn

    return deco


def make_spatial_index(cfg: SpatialIndexUnion, *, deps: dict | None = None) -> SpatialIndexFactory:
    try:
        maker = _spatial_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown spatial index kind {cfg.kind!r}") from None
    return maker(cfg, deps or {})


@register_spatial_index("kdtree")
def _make_kdtree(cfg: SpatialIndexKDTreeModel, deps):
    return partial(KDTreeSpatialIndex, leafsize=cfg.leafsize)


@register_spatial_index("brute_force")
def _make_brute_force(cfg: SpatialIndexBruteForceModel, deps):
    return BruteForceSpatialIndex


# ------------------- Prefix index registry ---------------------------


def register_prefix_index(kind: str):
    def deco(fn: PrefixFactoryMaker):
        _prefix_registry[kind] = fn
        return fn

    return deco


def make_prefix_index(cfg: PrefixIndexUnion, *, deps: dict | None = None) -> PrefixIndexFactory:
    try:
        maker = _prefix_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown prefix index kind {cfg.kind!r}") from None
    return maker(cfg, deps or {})


@register_prefix_index("trie")
def _make_trie(cfg: PrefixIndexTrieModel, deps):
    return TrieSet


@register_prefix_index("sorted")
def _make_sorted(cfg: PrefixIndexSortedModel, deps):
    return SortedPrefixIndex


# ------------------- Graphs ---------------------------


def resolve_graph(ref: GraphByPath | None, *, deps: dict) -> NetworkXLocationGraph:
    """
    deps can include:
      - 'graph': Any  # a prebuilt networkx graph, used when no ref is given
    """
    if ref is None:
        if "graph" in deps:
            return NetworkXLocationGraph(deps["graph"])
        raise ValueError("No graph provided")
    if isinstance(ref, GraphByPath):
        if os.path.exists(ref.file):
            G: Any = load_graph_from_path(ref.file, ref.fmt)
        elif ref.must_exist:
            raise FileNotFoundError(ref.file)
        else:
            G = nx.Graph()  # optional graph: serve empty indices
        return NetworkXLocationGraph(
            G, lon_attr=ref.lon_attr, lat_attr=ref.lat_attr, name_attr=ref.name_attr
        )
    raise TypeError(ref)

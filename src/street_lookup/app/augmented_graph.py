# street_lookup/app/augmented_graph.py
import time
from typing import Literal

from street_lookup.app.protocols import (
    LocationGraph,
    PrefixIndex,
    PrefixIndexFactory,
    SpatialIndex,
    SpatialIndexFactory,
)
from street_lookup.domain.entities.geography import LocationRecord, Point, Vertex
from street_lookup.domain.indexes.prefix_indexes import TrieSet
from street_lookup.domain.indexes.spatial_indexes import KDTreeSpatialIndex
from street_lookup.domain.naming import clean_name
from street_lookup.io.hooks import LookupHooks, NoopHooks

DuplicatePolicy = Literal["keep_last", "keep_first", "reject"]


class DuplicatePointError(ValueError):
    """Two connected vertices share exact coordinates under the 'reject' policy."""


class AugmentedGraph:
    """
    Read-only lookup layer over a loaded LocationGraph.

    Built in one pass:
      • vertices with at least one edge -> Point-to-id map + spatial index (bulk build)
      • vertices with a usable name     -> name-to-vertices map + prefix index
    Nothing is mutated after __init__, so concurrent readers need no locking.
    """

    def __init__(
        self,
        graph: LocationGraph,
        *,
        spatial_index: SpatialIndexFactory = KDTreeSpatialIndex,
        prefix_index: PrefixIndexFactory = TrieSet,
        duplicate_points: DuplicatePolicy = "keep_last",
        hooks: LookupHooks | None = None,
    ):
        if graph is None:
            raise ValueError("AugmentedGraph needs a fully loaded location graph")
        if duplicate_points not in ("keep_last", "keep_first", "reject"):
            raise ValueError(f"Unknown duplicate point policy {duplicate_points!r}")
        self.graph = graph
        self._hooks = hooks or NoopHooks()

        t0 = time.perf_counter()
        self._hooks.build_start(graph=graph)

        point_to_id: dict[Point, int] = {}
        name_to_vertices: dict[str, list[Vertex]] = {}
        names: PrefixIndex = prefix_index()
        n_vertices = collisions = 0

        for v in graph.all_vertices():
            n_vertices += 1
            if graph.has_edges(v.id):
                p = v.point
                prev = point_to_id.get(p)
                if prev is None:
                    point_to_id[p] = v.id
                elif prev != v.id:
                    collisions += 1
                    if duplicate_points == "reject":
                        raise DuplicatePointError(
                            f"vertices {prev} and {v.id} share coordinates ({p.lon}, {p.lat})"
                        )
                    kept = v.id if duplicate_points == "keep_last" else prev
                    point_to_id[p] = kept
                    self._hooks.duplicate_point(
                        lon=p.lon,
                        lat=p.lat,
                        kept_id=kept,
                        dropped_id=prev if kept == v.id else v.id,
                        policy=duplicate_points,
                    )

            key = clean_name(v.name) if v.name else ""
            if key:
                name_to_vertices.setdefault(key, []).append(v)
                names.add(key)

        # dict keys keep first-seen order and hold each distinct point once
        self._spatial: SpatialIndex = spatial_index(list(point_to_id))
        self._point_to_id = point_to_id
        self._names = names
        self._name_to_vertices: dict[str, tuple[Vertex, ...]] = {
            k: tuple(vs) for k, vs in name_to_vertices.items()
        }

        self._hooks.build_end(
            vertices=n_vertices,
            points=len(self._point_to_id),
            names=len(self._name_to_vertices),
            collisions=collisions,
            wall_ms=(time.perf_counter() - t0) * 1000,
        )

    # ---------------- Queries -----------------------------

    def closest(self, lon: float, lat: float) -> int:
        """
        Id of the connected vertex nearest (lon, lat).
        EmptyIndexError if no vertex has an edge; NonFiniteQueryError for inf/nan input.
        """
        t0 = time.perf_counter()
        try:
            p = self._spatial.nearest(lon, lat)
        except (LookupError, ValueError) as exc:
            self._hooks.error("closest", exc=exc, lon=lon, lat=lat)
            raise
        vid = self._point_to_id[p]
        self._hooks.query(
            "closest", ms=(time.perf_counter() - t0) * 1000, lon=lon, lat=lat, id=vid
        )
        return vid

    def locations_by_prefix(self, prefix: str) -> list[str]:
        """
        Display names of every location whose cleaned name starts with the cleaned prefix.
        Deduplicated by exact display name; order carries no meaning.
        """
        t0 = time.perf_counter()
        found: dict[str, None] = {}
        for key in self._names.with_prefix(clean_name(prefix)):
            for v in self._name_to_vertices[key]:
                found[v.name] = None
        out = list(found)
        self._hooks.query(
            "locations_by_prefix",
            ms=(time.perf_counter() - t0) * 1000,
            prefix=prefix,
            results=len(out),
        )
        return out

    def locations_by_exact_name(self, name: str) -> list[LocationRecord]:
        """One record per vertex whose cleaned name equals the cleaned query, in graph order."""
        t0 = time.perf_counter()
        vertices = self._name_to_vertices.get(clean_name(name), ())
        out = [LocationRecord.from_vertex(v) for v in vertices]
        self._hooks.query(
            "locations_by_exact_name",
            ms=(time.perf_counter() - t0) * 1000,
            name=name,
            results=len(out),
        )
        return out

    # ---------------- Introspection -----------------------

    @property
    def n_points(self) -> int:
        return len(self._spatial)

    @property
    def n_names(self) -> int:
        return len(self._names)

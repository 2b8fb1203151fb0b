from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import Protocol, runtime_checkable

from street_lookup.domain.entities.geography import Point, Vertex


# ------------- Collaborators --------------------
@runtime_checkable
class LocationGraph(Protocol):
    """
    Responsibilities:
    • Enumerate every vertex of a fully loaded graph (id, lon, lat, optional name).
    • Answer whether a vertex has at least one connected edge.
    Must be completely loaded before any index is built over it.
    """

    def all_vertices(self) -> Iterable[Vertex]: ...
    def has_edges(self, vertex_id: int) -> bool: ...


@runtime_checkable
class SpatialIndex(Protocol):
    """
    Built once, in bulk, from a sequence of points (see SpatialIndexFactory).
    nearest() is defined whenever the index is non-empty; ties are the index's business.
    """

    def nearest(self, lon: float, lat: float) -> Point: ...
    def __len__(self) -> int: ...


@runtime_checkable
class PrefixIndex(Protocol):
    """
    Populated incrementally with add(), queried afterwards.
    with_prefix() yields every stored key starting with the prefix; it is lazy,
    finite and can be called again for a fresh iteration.
    """

    def add(self, key: str) -> None: ...
    def with_prefix(self, prefix: str) -> Iterator[str]: ...
    def __len__(self) -> int: ...
    def __contains__(self, key: object) -> bool: ...


SpatialIndexFactory = Callable[[Sequence[Point]], SpatialIndex]
PrefixIndexFactory = Callable[[], PrefixIndex]

from collections.abc import Iterator

import networkx as nx

from street_lookup.app.protocols import LocationGraph
from street_lookup.domain.entities.geography import Vertex


class NetworkXLocationGraph(LocationGraph):
    """
    Adapter over a loaded networkx graph (osmnx-style node attributes by default:
    x = longitude, y = latitude, name = display name).
    Attribute values read back from GraphML may be strings; coordinates are coerced to float.
    """

    def __init__(
        self,
        G: nx.Graph,
        *,
        lon_attr: str = "x",
        lat_attr: str = "y",
        name_attr: str = "name",
    ):
        if G is None:
            raise ValueError("a loaded networkx graph is required")
        self.G = G
        self.lon_attr, self.lat_attr, self.name_attr = lon_attr, lat_attr, name_attr

    def _vertex(self, n, data: dict) -> Vertex:
        try:
            lon, lat = float(data[self.lon_attr]), float(data[self.lat_attr])
        except KeyError as e:
            raise KeyError(f"vertex {n!r} has no {e.args[0]!r} attribute") from None
        name = data.get(self.name_attr)
        return Vertex(id=int(n), lon=lon, lat=lat, name=None if name is None else str(name))

    def all_vertices(self) -> Iterator[Vertex]:
        for n, data in self.G.nodes(data=True):
            yield self._vertex(n, data)

    def has_edges(self, vertex_id: int) -> bool:
        # degree counts both directions on a DiGraph and every key on a MultiGraph
        return self.G.degree(vertex_id) > 0

    def __len__(self) -> int:
        return self.G.number_of_nodes()


def graph_from_records(
    vertices: list[Vertex], edges: list[tuple[int, int]], *, directed: bool = False
) -> NetworkXLocationGraph:
    """Small in-memory graph, handy for fixtures and demos."""
    G = nx.DiGraph() if directed else nx.Graph()
    for v in vertices:
        attrs = {"x": v.lon, "y": v.lat}
        if v.name is not None:
            attrs["name"] = v.name
        G.add_node(v.id, **attrs)
    G.add_edges_from(edges)
    return NetworkXLocationGraph(G)

# street_lookup/runtime/resources.py
import json
import pickle
from functools import lru_cache

import networkx as nx


@lru_cache(maxsize=8)
def load_graph_from_path(file: str, fmt: str) -> nx.Graph:
    if fmt == "pickle":
        with open(file, "rb") as f:
            return pickle.load(f)
    if fmt == "graphml":
        # OSM ids are integers; GraphML stores node ids as text
        return nx.read_graphml(file, node_type=int)
    if fmt == "json":
        with open(file, encoding="utf-8") as f:
            data = json.load(f)
        # networkx < 3.6 writes "links", later releases write "edges"
        return nx.node_link_graph(data, edges="edges" if "edges" in data else "links")
    raise ValueError(f"Unsupported graph fmt {fmt!r}")

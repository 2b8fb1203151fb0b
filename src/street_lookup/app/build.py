# street_lookup/app/build.py
import logging
from collections.abc import Mapping
from dataclasses import dataclass

import networkx as nx

from street_lookup.app.augmented_graph import AugmentedGraph
from street_lookup.config.models import LookupModel
from street_lookup.domain.graphs import NetworkXLocationGraph
from street_lookup.io.hooks import NoopHooks
from street_lookup.io.lookup_logging import LookupLogging  # JSON logs
from street_lookup.runtime.registries import make_prefix_index, make_spatial_index, resolve_graph


@dataclass
class App:
    config: LookupModel
    graph: NetworkXLocationGraph
    lookup: AugmentedGraph


def build(
    cfg: LookupModel | Mapping,
    *,
    graph: nx.Graph | None = None,
    use_logging: bool = True,
    logger: logging.Logger | None = None,
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, LookupModel) else LookupModel.model_validate(cfg)

    # 1) Hooks
    hooks = (
        LookupLogging(
            name=model.name,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
            logger=logger,
        )
        if use_logging
        else NoopHooks()
    )

    # 2) Graph (file from config, or a prebuilt networkx graph)
    deps = {"graph": graph} if graph is not None else {}
    location_graph = resolve_graph(None if graph is not None else model.graph, deps=deps)

    # 3) Index factories
    spatial = make_spatial_index(model.spatial_index)
    prefix = make_prefix_index(model.prefix_index)

    # 4) One augmented graph per process; handed to whoever serves requests
    lookup = AugmentedGraph(
        location_graph,
        spatial_index=spatial,
        prefix_index=prefix,
        duplicate_points=model.duplicate_points,
        hooks=hooks,
    )
    return App(model, location_graph, lookup)

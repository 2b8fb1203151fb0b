"""
HTTP surface for a map UI: nearest intersection, autocomplete, exact-name lookup.
The augmented graph is built once by the caller and handed to create_app().
"""

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from street_lookup.app.augmented_graph import AugmentedGraph
from street_lookup.domain.indexes.spatial_indexes import EmptyIndexError, NonFiniteQueryError


def create_app(lookup: AugmentedGraph, *, title: str = "Street Lookup") -> FastAPI:
    app = FastAPI(title=title)
    app.add_middleware(
        CORSMiddleware, allow_origins=["*"], allow_methods=["GET"], allow_headers=["*"]
    )
    app.state.lookup = lookup

    @app.get("/health")
    def health():
        return {"status": "ok", "points": lookup.n_points, "names": lookup.n_names}

    @app.get("/closest")
    def closest(lon: float = Query(...), lat: float = Query(...)):
        try:
            return {"id": lookup.closest(lon, lat)}
        except EmptyIndexError as e:
            raise HTTPException(status_code=503, detail=str(e)) from e
        except NonFiniteQueryError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e

    @app.get("/search")
    def search(term: str = Query(...)):
        return {"names": lookup.locations_by_prefix(term)}

    @app.get("/locations")
    def locations(name: str = Query(...)):
        return {"locations": [r.as_dict() for r in lookup.locations_by_exact_name(name)]}

    return app

import os
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = Field(default=1, ge=1)


class ServeModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)


# ----------------- GRAPH ---------------------


class GraphByPath(BaseModel):
    model_config = ConfigDict(extra="forbid")
    by: Literal["path"] = "path"
    file: str
    fmt: Literal["pickle", "graphml", "json"] = "pickle"
    must_exist: bool = True
    lon_attr: str = "x"
    lat_attr: str = "y"
    name_attr: str = "name"

    @field_validator("file")
    @classmethod
    def _expand(cls, v: str) -> str:
        return os.path.expandvars(os.path.expanduser(v))


# ----------------- SPATIAL INDEXES ---------------------


class SpatialIndexKDTreeModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["kdtree"] = "kdtree"
    leafsize: int = Field(default=16, ge=1)


class SpatialIndexBruteForceModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["brute_force"] = "brute_force"


SpatialIndexUnion = Annotated[
    SpatialIndexKDTreeModel | SpatialIndexBruteForceModel,
    Field(discriminator="kind"),
]

# ----------------- PREFIX INDEXES ---------------------


class PrefixIndexTrieModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["trie"] = "trie"


class PrefixIndexSortedModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["sorted"] = "sorted"


PrefixIndexUnion = Annotated[
    PrefixIndexTrieModel | PrefixIndexSortedModel,
    Field(discriminator="kind"),
]

# ------------------------------------------------------------------


class LookupModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "default"
    graph: GraphByPath | None = None  # None => caller supplies a prebuilt graph
    spatial_index: SpatialIndexUnion = Field(default_factory=SpatialIndexKDTreeModel)
    prefix_index: PrefixIndexUnion = Field(default_factory=PrefixIndexTrieModel)
    # coordinate collisions between connected vertices
    duplicate_points: Literal["keep_last", "keep_first", "reject"] = "keep_last"
    log: LogModel = LogModel()
    serve: ServeModel = ServeModel()

from dataclasses import dataclass


# Core geometry types used by the lookup indices
@dataclass(frozen=True)
class Point:
    lon: float  # degrees, compared by exact value
    lat: float


@dataclass(frozen=True)
class Vertex:
    id: int
    lon: float
    lat: float
    name: str | None = None  # None => unnamed (e.g., plain intersection)

    @property
    def point(self) -> Point:
        return Point(self.lon, self.lat)


@dataclass(frozen=True)
class LocationRecord:
    lat: float
    lon: float
    name: str
    id: int

    @classmethod
    def from_vertex(cls, v: Vertex) -> "LocationRecord":
        return cls(lat=v.lat, lon=v.lon, name=v.name, id=v.id)

    def as_dict(self) -> dict:
        return {"lat": self.lat, "lon": self.lon, "name": self.name, "id": self.id}

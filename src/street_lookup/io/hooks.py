# io/hooks.py
from typing import Protocol


class LookupHooks(Protocol):
    def build_start(self, *, graph): ...
    def build_end(self, *, vertices, points, names, collisions, wall_ms): ...
    def duplicate_point(self, *, lon, lat, kept_id, dropped_id, policy): ...
    def query(self, op: str, *, ms, **kw): ...
    def error(self, op: str, *, exc: BaseException, **kw): ...


class NoopHooks:
    def build_start(self, **_):
        pass

    def build_end(self, **_):
        pass

    def duplicate_point(self, **_):
        pass

    def query(self, *_, **__):
        pass

    def error(self, *_, **__):
        pass

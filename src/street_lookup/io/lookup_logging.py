# io/lookup_logging.py
import itertools
import json
import logging
import sys

from street_lookup.io.hooks import NoopHooks


def _default_json_logger(name="street_lookup", level="INFO", stream=None):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(stream or sys.stdout)

        class _JsonFormatter(logging.Formatter):
            def format(self, record: logging.LogRecord) -> str:
                payload = {
                    "level": record.levelname,
                    "msg": record.getMessage(),
                    "logger": record.name,
                }
                extra = getattr(record, "extra", None)
                if isinstance(extra, dict):
                    payload.update(extra)
                return json.dumps(payload, default=str)

        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


class LookupLogging(NoopHooks):
    """
    One place to shape and emit structured logs for index builds and queries.
    """

    def __init__(
        self,
        name: str = "default",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 1000,
        logger: logging.Logger | None = None,
    ):
        self.name, self.debug, self.sample_every = name, debug, max(1, sample_every)
        self.log = logger or _default_json_logger(level="DEBUG" if debug else level)
        self._seq = itertools.count(1)

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        payload = {"graph": self.name}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    # --------------------------------------------------------

    # build lifecycle

    def build_start(self, *, graph):
        self._emit("INFO", "build_start", graph_type=type(graph).__name__)

    def build_end(self, *, vertices, points, names, collisions, wall_ms):
        self._emit(
            "INFO",
            "build_end",
            vertices=vertices,
            points=points,
            names=names,
            collisions=collisions,
            wall_ms=round(wall_ms, 3),
        )

    def duplicate_point(self, *, lon, lat, kept_id, dropped_id, policy):
        self._emit(
            "WARNING",
            "duplicate_point",
            lon=lon,
            lat=lat,
            kept_id=kept_id,
            dropped_id=dropped_id,
            policy=policy,
        )

    # queries

    def query(self, op: str, *, ms, **kw):
        # next() on a count is atomic; no two queries share a seq
        n = next(self._seq)
        if self.debug and n % self.sample_every == 0:
            self._emit("DEBUG", op, ms=round(ms, 3), seq=n, **kw)

    def error(self, op: str, *, exc: BaseException, **kw):
        self._emit("ERROR", "lookup_error", op=op, error=str(exc), **kw)

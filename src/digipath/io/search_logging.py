# io/search_logging.py
import json
import logging
import sys

from digipath.io.recorder import Recorder
from digipath.search.events import NodeSettled, SearchFinished
from digipath.search.hooks import NoopHooks


def _default_json_logger(name="digipath", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)

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


class SearchLogging(NoopHooks):
    """
    Structured logs for tangency searches, plus settle/finish events for the recorder.
    Per-settle lines are DEBUG only and sampled every `sample_every` steps.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 1000,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id, self.debug, self.sample_every = run_id, debug, max(1, sample_every)
        self.recorder = recorder
        self.log = logger or _default_json_logger(level=level)

    def _emit(self, level: str, msg: str, **extra):
        self.log.log(getattr(logging, level), msg, extra={"extra": {"run_id": self.run_id, **extra}})

    # search lifecycle

    def search_start(self, *, search_id: int, source: int, opt: float, size: int):
        self._emit("INFO", "search_start", search_id=search_id, source=source, opt=opt, size=size)

    def settle(self, node, *, search_id: int, step: int, frontier: int):
        if self.debug and (step % self.sample_every) == 0:
            self._emit(
                "DEBUG",
                "settle",
                search_id=search_id,
                step=step,
                index=node.index,
                ancestor=node.ancestor,
                distance=node.distance,
                frontier=frontier,
            )
        if self.recorder:
            self.recorder.emit(NodeSettled(search_id, step, node.index, node.ancestor, node.distance))

    def search_end(self, *, search_id: int, settled: int, last_distance: float, wall_ms: float):
        self._emit(
            "INFO",
            "search_end",
            search_id=search_id,
            settled=settled,
            last_distance=last_distance,
            wall_ms=wall_ms,
        )
        if self.recorder:
            self.recorder.emit(SearchFinished(search_id, settled, last_distance))

    def warning(self, msg: str, **extra):
        self._emit("WARNING", msg, **extra)

    def error(self, msg: str, **extra):
        self._emit("ERROR", msg, **extra)

# search/hooks.py
from typing import Protocol


class SearchHooks(Protocol):
    def search_start(self, *, search_id, source, opt, size): ...
    def settle(self, node, *, search_id, step, frontier): ...
    def search_end(self, *, search_id, settled, last_distance, wall_ms): ...
    def warning(self, msg: str, **kw): ...
    def error(self, msg: str, **kw): ...


class NoopHooks:
    def search_start(self, **_):
        pass

    def settle(self, *_, **__):
        pass

    def search_end(self, **_):
        pass

    def warning(self, *_, **__):
        pass

    def error(self, *_, **__):
        pass

# digipath/geometry/voronoi.py
"""
Separable exact Voronoi map and distance transform on rectangular domains.

Sites are the cells where the mask is False. Each pass along one axis turns,
for every line of that axis, the per-cell candidate sites into the lower
envelope of their Lp distance functions, then assigns each cell the envelope
site in front of it. After the last axis every cell holds a nearest site.
Comparisons use the integer power sum |a - b|_p^p, so ties are exact.
"""

from collections.abc import Callable, Sequence

import numpy as np

from digipath.app.protocols import SeparableMetric
from digipath.domain.points import Point
from digipath.errors import IndexOutOfRangeError


class LpMetric(SeparableMetric):
    def __init__(self, p: int = 2):
        if isinstance(p, bool) or not isinstance(p, int) or p < 1:
            raise ValueError(f"p must be an integer >= 1, got {p!r}")
        self.p = p

    def power(self, a: Sequence[int], b: Sequence[int]) -> int:
        return sum(abs(int(x) - int(y)) ** self.p for x, y in zip(a, b))

    def distance(self, a: Sequence[int], b: Sequence[int]) -> float:
        return float(self.power(a, b)) ** (1.0 / self.p)

    def __repr__(self) -> str:
        return f"LpMetric(p={self.p})"


def _first_true(pred: Callable[[int], bool], lo: int, hi: int) -> int:
    """Smallest r in [lo, hi] with pred(r), pred monotone False..True; hi + 1 if none."""
    a, b = lo, hi + 1
    while a < b:
        mid = (a + b) // 2
        if pred(mid):
            b = mid
        else:
            a = mid + 1
    return a


class VoronoiMap:
    def __init__(
        self,
        mask,
        metric: SeparableMetric | None = None,
        lower: Sequence[int] | None = None,
    ):
        mask = np.asarray(mask, dtype=bool)
        if mask.ndim == 0:
            raise ValueError("mask must have at least one dimension")
        self.metric = metric or LpMetric(2)
        self.lower: Point = tuple(int(c) for c in lower) if lower is not None else (0,) * mask.ndim
        if len(self.lower) != mask.ndim:
            raise ValueError(f"lower bound {self.lower} does not match a {mask.ndim}D mask")
        self.shape = mask.shape
        self.upper: Point = tuple(lo + n - 1 for lo, n in zip(self.lower, self.shape))
        self.sites, self.has_site = self._compute(mask)

    @property
    def dim(self) -> int:
        return len(self.shape)

    @property
    def domain(self) -> tuple[Point, Point]:
        return self.lower, self.upper

    def __call__(self, p: Sequence[int]) -> Point | None:
        key = self._offset(p)
        if not self.has_site[key]:
            return None
        return tuple(int(c) for c in self.sites[key])

    def distance(self, p: Sequence[int]) -> float:
        site = self(p)
        return float("inf") if site is None else self.metric.distance(p, site)

    def distance_map(self) -> np.ndarray:
        if isinstance(self.metric, LpMetric):
            diff = np.abs(self.sites - self._grid()).astype(np.float64)
            out = (diff**self.metric.p).sum(axis=-1) ** (1.0 / self.metric.p)
        else:
            out = np.empty(self.shape)
            for key in np.ndindex(self.shape):
                p = tuple(k + lo for k, lo in zip(key, self.lower))
                out[key] = self.metric.distance(p, self.sites[key])
        out[~self.has_site] = np.inf
        return out

    # ------------------ internals ----------------------

    def _offset(self, p: Sequence[int]) -> tuple[int, ...]:
        if len(p) != self.dim:
            raise ValueError(f"expected a {self.dim}D point, got {tuple(p)!r}")
        key = tuple(int(c) - lo for c, lo in zip(p, self.lower))
        if any(k < 0 or k >= n for k, n in zip(key, self.shape)):
            raise IndexOutOfRangeError(f"point {tuple(p)!r} outside {self.domain}")
        return key

    def _grid(self) -> np.ndarray:
        grid = np.indices(self.shape, dtype=np.int64)
        grid = np.moveaxis(grid, 0, -1)
        return grid + np.asarray(self.lower, dtype=np.int64)

    def _compute(self, mask: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        has = ~mask
        sites = np.zeros(self.shape + (self.dim,), dtype=np.int64)
        sites[has] = self._grid()[has]
        for axis in range(self.dim):
            self._sweep(sites, has, axis)
        return sites, has

    def _sweep(self, sites: np.ndarray, has: np.ndarray, axis: int) -> None:
        # views: writes land in sites / has
        sv = np.moveaxis(sites, axis, -2)
        hv = np.moveaxis(has, axis, -1)
        lo = self.lower[axis]
        hi = self.upper[axis]
        for idx in np.ndindex(hv.shape[:-1]):
            line_has = hv[idx]
            if not line_has.any():
                continue
            line_sites = sv[idx]
            q = [k + b for k, b in zip(idx[:axis], self.lower[:axis])]
            q += [lo]
            q += [k + b for k, b in zip(idx[axis:], self.lower[axis + 1 :])]

            stack: list[Point] = []
            for r in np.flatnonzero(line_has):
                w = tuple(int(c) for c in line_sites[r])
                while len(stack) >= 2 and self._hidden_by(stack[-2], stack[-1], w, q, axis, lo, hi):
                    stack.pop()
                stack.append(w)

            power = self.metric.power
            k = 0
            for r in range(hi - lo + 1):
                q[axis] = lo + r
                while k + 1 < len(stack) and power(stack[k + 1], q) < power(stack[k], q):
                    k += 1
                line_sites[r] = stack[k]
                line_has[r] = True

    def _hidden_by(self, u: Point, v: Point, w: Point, q: list[int], axis: int, lo: int, hi: int) -> bool:
        """True when v is never strictly closer than both u and w on the line."""
        power = self.metric.power

        def at(r: int) -> list[int]:
            p = list(q)
            p[axis] = r
            return p

        v_beats_u = _first_true(lambda r: power(v, at(r)) < power(u, at(r)), lo, hi)
        w_ties_v = _first_true(lambda r: power(w, at(r)) <= power(v, at(r)), lo, hi)
        return v_beats_u >= w_ties_v


def voronoi_map(mask, metric: SeparableMetric | None = None, lower: Sequence[int] | None = None) -> VoronoiMap:
    return VoronoiMap(mask, metric, lower)


def distance_transform(
    mask, metric: SeparableMetric | None = None, lower: Sequence[int] | None = None
) -> np.ndarray:
    return VoronoiMap(mask, metric, lower).distance_map()

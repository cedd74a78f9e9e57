# runtime/registries.py
from collections.abc import Callable

from digipath.app.protocols import OracleFactory
from digipath.config.models import (
    OracleFixedModel,
    OracleFullConvexityModel,
    OracleUnion,
    ShapeBallModel,
    ShapeBoxModel,
    ShapePointsModel,
    ShapeUnion,
)
from digipath.domain import shapes
from digipath.domain.shapes import DigitalImage
from digipath.geometry.tangency import FullConvexityOracle, fixed_adjacency

ShapeFactory = Callable[[ShapeUnion, dict], DigitalImage]
OracleFactoryMaker = Callable[[OracleUnion, dict], OracleFactory]

_shape_registry: dict[str, ShapeFactory] = {}
_oracle_registry: dict[str, OracleFactoryMaker] = {}


# ------------------- Shapes ---------------------------


def register_shape(kind: str):
    def deco(fn: ShapeFactory):
        _shape_registry[kind] = fn
        return fn

    return deco


def make_shape(cfg: ShapeUnion, *, deps: dict | None = None) -> DigitalImage:
    try:
        factory = _shape_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown shape kind {cfg.kind!r}") from None
    return factory(cfg, deps or {})


@register_shape("ball")
def _make_ball(cfg: ShapeBallModel, deps):
    return shapes.ball(cfg.radius, dim=cfg.dim, center=cfg.center)


@register_shape("box")
def _make_box(cfg: ShapeBoxModel, deps):
    return shapes.box(cfg.lower, cfg.upper)


@register_shape("points")
def _make_points(cfg: ShapePointsModel, deps):
    return shapes.from_points(cfg.points)


# ------------------- Oracles ---------------------------


def register_oracle(kind: str):
    def deco(fn: OracleFactoryMaker):
        _oracle_registry[kind] = fn
        return fn

    return deco


def make_oracle(cfg: OracleUnion, *, deps: dict | None = None) -> OracleFactory:
    try:
        maker = _oracle_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown oracle kind {cfg.kind!r}") from None
    return maker(cfg, deps or {})


@register_oracle("full_convexity")
def _make_full_convexity(cfg: OracleFullConvexityModel, deps):
    return FullConvexityOracle


@register_oracle("fixed")
def _make_fixed(cfg: OracleFixedModel, deps):
    return fixed_adjacency(cfg.edges)

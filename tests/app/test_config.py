# tests/app/test_config.py
import math

import pytest
from pydantic import ValidationError

from digipath.config.models import ScenarioModel, ShapeBallModel
from digipath.geometry.tangency import FullConvexityOracle
from digipath.runtime.registries import make_oracle, make_shape


def _cfg(**kw):
    cfg = {"name": "c", "shape": {"kind": "ball", "radius": 3}, "sources": [[0, 0, 3]]}
    cfg.update(kw)
    return cfg


def test_defaults():
    m = ScenarioModel.model_validate(_cfg())
    assert m.paths.opt == pytest.approx(math.sqrt(3.0))
    assert m.oracle.kind == "full_convexity"
    assert m.voronoi.p == 2
    assert isinstance(m.shape, ShapeBallModel)
    assert make_oracle(m.oracle) is FullConvexityOracle


@pytest.mark.parametrize(
    "override",
    [
        {"sources": []},
        {"sources": [[0, 0, 0]] * 3},
        {"paths": {"opt": -1.0}},
        {"paths": {"opt": math.inf}},
        {"voronoi": {"p": 0}},
        {"oracle": {"kind": "magic"}},
        {"shape": {"kind": "ball", "radius": 2, "dim": 2, "center": [0, 0, 0]}},
        {"shape": {"kind": "box", "lower": [0, 0], "upper": [2, -1]}},
        {"shape": {"kind": "box", "lower": [0, 0], "upper": [2, 2, 2]}},
        {"shape": {"kind": "points", "points": [[0, 0], [1, 1, 1]]}},
        {"shape": {"kind": "points", "points": []}},
        {"typo": True},
    ],
)
def test_invalid_configs_are_rejected(override):
    with pytest.raises(ValidationError):
        ScenarioModel.model_validate(_cfg(**override))


def test_shape_registry_builds_each_kind():
    m = ScenarioModel.model_validate(
        _cfg(shape={"kind": "box", "lower": [1, 1], "upper": [2, 3]})
    )
    box = make_shape(m.shape)
    assert box.lower == (1, 1) and box.upper == (2, 3)

    m = ScenarioModel.model_validate(_cfg(shape={"kind": "points", "points": [[4, 4], [0, 1]]}))
    assert make_shape(m.shape).points() == [(0, 1), (4, 4)]

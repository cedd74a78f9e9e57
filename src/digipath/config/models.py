import math
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = Field(default=1000, ge=1)


# ----------------- SHAPES ---------------------


class ShapeBallModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["ball"] = "ball"
    radius: float = Field(gt=0)
    dim: int = Field(default=3, ge=1)
    center: tuple[int, ...] | None = None
    boundary_only: bool = True  # feed the voxels behind the surface, as for volumes

    @model_validator(mode="after")
    def _check_center(self):
        if self.center is not None and len(self.center) != self.dim:
            raise ValueError(f"center must have {self.dim} coordinates")
        return self


class ShapeBoxModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["box"] = "box"
    lower: tuple[int, ...]
    upper: tuple[int, ...]
    boundary_only: bool = False

    @model_validator(mode="after")
    def _check_bounds(self):
        if len(self.lower) != len(self.upper):
            raise ValueError("lower and upper must have the same dimension")
        if any(lo > hi for lo, hi in zip(self.lower, self.upper)):
            raise ValueError("lower must be <= upper on every axis")
        return self


class ShapePointsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["points"] = "points"
    points: list[tuple[int, ...]] = Field(min_length=1)

    @field_validator("points")
    @classmethod
    def _same_dim(cls, v):
        if len({len(p) for p in v}) != 1:
            raise ValueError("all points must have the same dimension")
        return v


ShapeUnion = Annotated[
    ShapeBallModel | ShapeBoxModel | ShapePointsModel,
    Field(discriminator="kind"),
]

# ----------------- ORACLES ---------------------


class OracleFullConvexityModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["full_convexity"] = "full_convexity"


class OracleFixedModel(BaseModel):
    """Explicit edge list over point indices."""

    model_config = ConfigDict(extra="forbid")
    kind: Literal["fixed"] = "fixed"
    edges: list[tuple[int, int]] = Field(default_factory=list)


OracleUnion = Annotated[
    OracleFullConvexityModel | OracleFixedModel, Field(discriminator="kind")
]

# ----------------- SEARCH ---------------------


class ShortestPathsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    opt: float = math.sqrt(3.0)  # >= sqrt(dim): secure; 0: fast
    precompute: bool = False

    @field_validator("opt")
    @classmethod
    def _finite_nonneg(cls, v: float) -> float:
        if not math.isfinite(v) or v < 0:
            raise ValueError("opt must be a finite value >= 0")
        return v


class VoronoiModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    p: int = Field(default=2, ge=1)


# ------------------------------------------------------------------


class ScenarioModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    run_id: str = "local"
    log: LogModel = LogModel()
    shape: ShapeUnion
    oracle: OracleUnion = Field(default_factory=OracleFullConvexityModel)
    paths: ShortestPathsModel = ShortestPathsModel()
    voronoi: VoronoiModel = VoronoiModel()
    # one source: single-source drain; two: bidirectional meet in the middle
    sources: list[tuple[int, ...]] = Field(min_length=1, max_length=2)

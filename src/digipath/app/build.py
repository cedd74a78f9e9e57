# digipath/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass, field

import numpy as np

from digipath.config.models import ScenarioModel, ShapePointsModel, ShapeUnion
from digipath.domain.points import Index, Point
from digipath.domain.shapes import DigitalImage
from digipath.geometry.tangency_computer import TangencyComputer
from digipath.geometry.voronoi import LpMetric, distance_transform
from digipath.io.recorder import MemorySink, Recorder
from digipath.io.search_logging import SearchLogging
from digipath.runtime.registries import make_oracle, make_shape
from digipath.search.bidirectional import MeetingPath, meet_in_the_middle
from digipath.search.hooks import NoopHooks, SearchHooks


@dataclass
class RunResult:
    sources: list[Index]
    distances: np.ndarray  # per point, min over the searches; inf when unreached
    max_distance: float
    path: MeetingPath | None = None  # only for two sources
    settled: list[int] = field(default_factory=list)


@dataclass
class App:
    model: ScenarioModel
    shape: DigitalImage
    computer: TangencyComputer
    hooks: SearchHooks
    recorder: Recorder | None

    def run(self) -> RunResult:
        opt = self.model.paths.opt
        if self.model.paths.precompute:
            self.computer.precompute(opt)
        sources = [self.computer.index(p) for p in self.model.sources]
        searches = [self.computer.make_shortest_paths(opt).init(s) for s in sources]

        path = None
        if len(searches) == 1:
            searches[0].run()
        else:
            path = meet_in_the_middle(*searches)

        distances = np.minimum.reduce([sp.distances() for sp in searches])
        reached = distances[np.isfinite(distances)]
        return RunResult(
            sources=sources,
            distances=distances,
            max_distance=float(reached.max()) if reached.size else 0.0,
            path=path,
            settled=[sp.settled_count for sp in searches],
        )

    def depth_map(self) -> np.ndarray:
        """Lp distance from each shape cell to the nearest cell outside the shape."""
        padded = np.pad(self.shape.image, 1, constant_values=False)
        lower = tuple(c - 1 for c in self.shape.lower)
        dt = distance_transform(padded, LpMetric(self.model.voronoi.p), lower)
        core = tuple(slice(1, -1) for _ in range(padded.ndim))
        return dt[core]


def shape_points(cfg: ShapeUnion, shape: DigitalImage) -> list[Point]:
    if isinstance(cfg, ShapePointsModel):
        return [tuple(p) for p in cfg.points]  # caller order fixes the indices
    return shape.boundary() if cfg.boundary_only else shape.points()


def build(cfg: ScenarioModel | Mapping, *, use_logging: bool = True, record: bool = False) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, ScenarioModel) else ScenarioModel.model_validate(cfg)

    # 1) Hooks (+ in-memory recorder for settle events)
    recorder = Recorder(MemorySink()) if record else None
    hooks = (
        SearchLogging(
            run_id=model.run_id,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
            recorder=recorder,
        )
        if use_logging or record
        else NoopHooks()
    )

    # 2) Shape & points
    shape = make_shape(model.shape)
    points = shape_points(model.shape, shape)

    # 3) Graph
    computer = TangencyComputer(points, oracle_factory=make_oracle(model.oracle), hooks=hooks)

    return App(model, shape, computer, hooks, recorder)

# tests/io/test_search_logging.py
import io
import json
import logging

from digipath.geometry.tangency_computer import TangencyComputer
from digipath.io.recorder import JsonlSink, MemorySink, Recorder
from digipath.io.search_logging import SearchLogging
from digipath.search.events import NodeSettled, SearchFinished


def _computer(hooks) -> TangencyComputer:
    return TangencyComputer([(0, 0, 0), (1, 0, 0), (2, 0, 0)], hooks=hooks)


def test_recorder_gets_settle_and_finish_events():
    sink = MemorySink()
    hooks = SearchLogging(logger=logging.getLogger("digipath.test"), recorder=Recorder(sink))
    sp = _computer(hooks).make_shortest_paths().init(0)
    sp.run()

    settled = sink.of_type(NodeSettled)
    assert [ev.index for ev in settled] == [0, 1, 2]
    assert [ev.step for ev in settled] == [1, 2, 3]
    assert settled[-1].distance == 2.0
    (done,) = sink.of_type(SearchFinished)
    assert done.settled == 3
    assert done.max_distance == 2.0
    assert done.search_id == sp.search_id


def test_lifecycle_and_insecure_opt_are_logged(caplog):
    caplog.set_level(logging.DEBUG, logger="digipath.test")
    hooks = SearchLogging(
        run_id="r1", debug=True, sample_every=2, logger=logging.getLogger("digipath.test")
    )
    sp = _computer(hooks).make_shortest_paths(0.0).init(0)
    sp.run()

    msgs = [r.getMessage() for r in caplog.records]
    assert msgs[0] == "insecure_opt"
    assert msgs[1] == "search_start"
    assert msgs.count("settle") == 1  # step 2 only
    assert msgs[-1] == "search_end"
    warn = caplog.records[0]
    assert warn.levelno == logging.WARNING
    assert warn.extra["run_id"] == "r1"


def test_jsonl_sink_writes_one_line_per_event():
    buf = io.StringIO()
    Recorder(JsonlSink(buf)).emit(SearchFinished(1, 3, 2.0))
    row = json.loads(buf.getvalue())
    assert row == {"event": "SearchFinished", "search_id": 1, "settled": 3, "max_distance": 2.0}


class _BrokenSink:
    def write(self, ev):
        raise OSError("disk full")


def test_broken_sink_does_not_stop_others():
    mem = MemorySink()
    rec = Recorder(_BrokenSink(), mem)
    rec.emit(SearchFinished(1, 1, 0.0))
    assert len(mem.events) == 1

# digipath/search/bidirectional.py
from dataclasses import dataclass

from digipath.domain.points import Index
from digipath.geometry.tangency import DEFAULT_OPT
from digipath.search.shortest_paths import ShortestPaths


@dataclass
class MeetingPath:
    indices: list[Index]  # source of the first search first
    meeting: Index
    length: float


def splice(sp0: ShortestPaths, sp1: ShortestPaths, meeting: Index) -> list[Index]:
    c0 = sp0.path_to_source(meeting)
    c1 = sp1.path_to_source(meeting)
    return c0[::-1][:-1] + c1


def meet_in_the_middle(
    sp0: ShortestPaths, sp1: ShortestPaths, *, max_rounds: int | None = None
) -> MeetingPath | None:
    """
    Alternate expand() on two seeded searches and stop at the first node one
    side settles that the other side has already visited.

    This early stop is a heuristic: the spliced path is not guaranteed to be
    the shortest one. Returns None when a search runs out of nodes (or the
    round budget is spent) before the two sides meet.
    """
    rounds = 0
    while not sp0.finished() and not sp1.finished():
        if max_rounds is not None and rounds >= max_rounds:
            return None
        n0 = sp0.expand()
        n1 = sp1.expand()
        rounds += 1
        if sp0.is_visited(n1.index):
            m = n1.index
        elif sp1.is_visited(n0.index):
            m = n0.index
        else:
            continue
        return MeetingPath(splice(sp0, sp1, m), m, sp0.distance(m) + sp1.distance(m))
    return None


def shortest_path_between(computer, a: Index, b: Index, opt: float = DEFAULT_OPT) -> MeetingPath | None:
    sp0 = computer.make_shortest_paths(opt).init(a)
    sp1 = computer.make_shortest_paths(opt).init(b)
    return meet_in_the_middle(sp0, sp1)

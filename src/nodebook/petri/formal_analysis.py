# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Formal Petri Net Analysis
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""Bounded reachability analysis of generic (token) nets.

Starting from the engine's current marking, every enabled transition is
fired on a copy of the marking and the successors are explored
breadth-first.  Token counts are unbounded, so the search stops after
``max_states`` distinct markings and reports itself as truncated.

The engine's own marking is never modified.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from .engine import Marking, Number, PetriEngine

MarkingKey = Tuple[Number, ...]


@dataclass
class ReachabilityReport:
    """Result of :func:`explore_reachability`.

    ``dead_markings`` are reachable markings with no enabled transition;
    ``fireable_transitions`` fired at least once during the search.
    """

    states: int = 0
    dead_markings: List[Marking] = field(default_factory=list)
    fireable_transitions: List[str] = field(default_factory=list)
    dead_transitions: List[str] = field(default_factory=list)
    truncated: bool = False

    @property
    def deadlock_reachable(self) -> bool:
        return bool(self.dead_markings)

    def to_dict(self) -> Dict[str, object]:
        return {
            "states": self.states,
            "dead_markings": [dict(m) for m in self.dead_markings],
            "fireable_transitions": list(self.fireable_transitions),
            "dead_transitions": list(self.dead_transitions),
            "truncated": self.truncated,
            "deadlock_reachable": self.deadlock_reachable,
        }


def _key(marking: Marking, places: List[str]) -> MarkingKey:
    return tuple(marking.get(p, 0) for p in places)


def explore_reachability(engine: PetriEngine, max_states: Optional[int] = None) -> ReachabilityReport:
    """BFS over markings reachable from the engine's current marking.

    Parameters
    ----------
    engine : PetriEngine
        Engine in token mode; accounting engines book without ever
        blocking and have no finite reachability graph.
    max_states : int, optional
        Safety limit on distinct markings; defaults to
        ``engine.settings.max_reachable_states``.

    Raises
    ------
    ValueError
        If *engine* runs in accounting mode or *max_states* is not positive.
    """
    if engine.accounting:
        raise ValueError("Reachability analysis requires a token net, not an accounting net.")
    limit = engine.settings.max_reachable_states if max_states is None else int(max_states)
    if limit <= 0:
        raise ValueError(f"max_states must be > 0, got {limit}")

    places = engine.places
    transitions = engine.transitions
    m0 = engine.marking

    visited: Set[MarkingKey] = {_key(m0, places)}
    queue: deque[Marking] = deque([m0])
    fireable: Set[str] = set()
    report = ReachabilityReport()

    while queue:
        current = queue.popleft()
        enabled = [t for t in transitions if engine.is_enabled(t, current)]
        if not enabled:
            report.dead_markings.append(current)
            continue
        for t in enabled:
            fireable.add(t)
            successor = engine.successor(t, current)
            key = _key(successor, places)
            if key in visited:
                continue
            if len(visited) >= limit:
                report.truncated = True
                continue
            visited.add(key)
            queue.append(successor)

    report.states = len(visited)
    report.fireable_transitions = [t for t in transitions if t in fireable]
    report.dead_transitions = [t for t in transitions if t not in fireable]
    return report

from __future__ import annotations

from typing import List, Sequence

from MetricTSP.algorithms.multigraph import Edge


class TourShortcutter:
    """Collapse an Eulerian circuit into a Hamiltonian tour by skipping revisits."""

    def shortcut(self, circuit: Sequence[Edge], start: int | None = None) -> List[int]:
        if not circuit:
            return [] if start is None else [start]
        walk = [circuit[0][0]] + [v for _, v in circuit]
        seen = set()
        path = []
        for vertex in walk:
            if vertex not in seen:
                seen.add(vertex)
                path.append(vertex)
        return path


__all__ = ["TourShortcutter"]

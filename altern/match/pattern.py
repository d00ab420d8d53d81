# altern/match/pattern.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class Pattern:
    """Snapshot of one derivation: the chosen alternative at a node plus the
    patterns of its sub-matches, in term order.

    Frozen and built from tuples, so it is hashable and never shares state
    with the matcher it came from.
    """
    variant: int
    children: Tuple["Pattern", ...] = ()

    def flatten(self) -> List[int]:
        """Pre-order variants: this node first, then each child subtree."""
        out: List[int] = []
        stack = [self]
        while stack:
            p = stack.pop()
            out.append(p.variant)
            stack.extend(reversed(p.children))
        return out

    @property
    def size(self) -> int:
        return 1 + sum(c.size for c in self.children)

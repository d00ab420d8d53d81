# altern/match/__init__.py
"""Backtracking enumeration of derivations.

- engine  : PatternMatcher, the stateful cursor, and its iteration states
- pattern : Pattern, an immutable snapshot of one derivation
- runtime : iter_matches / expand helpers and the MatchProgram / MatchRunner pair
"""

from .engine import (
    PatternMatcher, NOT_STARTED,
    Rewind, IterateLast, AppendMatcher, Valid, IterationState,
)
from .pattern import Pattern
from .runtime import Match, MatchProgram, MatchRunner, iter_matches, expand

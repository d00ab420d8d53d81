# altern/match/engine.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from ..grammar.ast import Alternative, Grammar, Literal, Rule, RuleKey, Term
from .pattern import Pattern

# Backtracking matcher:
# - One node per (rule, input position). Its children are the sub-matches of the
#   Ref terms of the current alternative, confirmed left to right.
# - Enumeration is depth-first in priority order: the last child varies fastest,
#   the node's own alternative slowest.
# - No memoization and no left recursion detection. A rule that can re-enter
#   itself without consuming input recurses until RecursionError.

NOT_STARTED = -1  # variant before the first attempt

# ---- Iteration states ----

@dataclass(frozen=True)
class Rewind:
    pass  # last child ran out of derivations: drop it

@dataclass(frozen=True)
class IterateLast:
    pass  # a literal mismatched: advance the last child (or own variant)

@dataclass(frozen=True)
class AppendMatcher:
    key: RuleKey
    pos: int  # where the new child starts matching

@dataclass(frozen=True)
class Valid:
    end: int  # one past the last consumed character

IterationState = Union[Rewind, IterateLast, AppendMatcher, Valid]


class PatternMatcher:
    """Stateful cursor over the derivations of one rule at one input position.

    Call `find_next()` to move to the next successful derivation; afterwards
    either `is_matched` holds (query `pattern()`, `end`, ...) or the matcher
    is exhausted for good.
    """

    def __init__(self, grammar: Grammar, key: RuleKey, text: str, pos: int = 0):
        self.grammar = grammar
        self.key = key
        self.rule: Rule = grammar[key]
        self.text = text      # full input, never copied
        self.pos = pos        # start of this node's view
        self.variant = NOT_STARTED
        self.children: List[PatternMatcher] = []
        self._end: Optional[int] = None

    def __repr__(self) -> str:
        return (f"PatternMatcher(key={self.key}, pos={self.pos}, "
                f"variant={self.variant}, children={len(self.children)})")

    # ---- State queries ----
    @property
    def is_unfinished(self) -> bool:
        return self.variant < len(self.rule.alternatives)

    @property
    def is_exhausted(self) -> bool:
        return not self.is_unfinished

    @property
    def is_matched(self) -> bool:
        return self._end is not None

    @property
    def end(self) -> int:
        if self._end is None:
            raise RuntimeError("matcher has no current match")
        return self._end

    @property
    def consumed(self) -> str:
        return self.text[self.pos:self.end]

    @property
    def leftover(self) -> str:
        return self.text[self.end:]

    def alternative(self) -> Alternative:
        # variant -1 would otherwise pick the last alternative
        if not 0 <= self.variant < len(self.rule.alternatives):
            raise RuntimeError(f"matcher has no current alternative (variant={self.variant})")
        return self.rule.alternatives[self.variant]

    def term_cursor(self) -> int:
        return self.alternative().term_cursor(len(self.children))

    def terms_left(self) -> Tuple[Term, ...]:
        return self.alternative().terms[self.term_cursor():]

    def _needs_rewind(self) -> bool:
        return bool(self.children) and self.children[-1].is_exhausted

    # ---- Step classification ----
    def iteration_state(self) -> IterationState:
        if self._needs_rewind():
            return Rewind()
        cur = self.children[-1].end if self.children else self.pos
        text = self.text
        for term in self.terms_left():
            if isinstance(term, Literal):
                # startswith is False when the input is too short
                if not text.startswith(term.text, cur):
                    return IterateLast()
                cur += len(term.text)
            else:
                return AppendMatcher(term.key, cur)
        return Valid(cur)

    # ---- Advancement ----
    def _step(self) -> None:
        if self.children:
            self.children[-1].find_next()
        else:
            self.variant += 1

    def find_next(self) -> None:
        """Advance to the next derivation in priority order (no-op once exhausted)."""
        if self.is_exhausted:
            return
        self._end = None
        self._step()
        while self.is_unfinished:
            state = self.iteration_state()
            if isinstance(state, Rewind):
                self.children.pop()
                self._step()
            elif isinstance(state, AppendMatcher):
                child = PatternMatcher(self.grammar, state.key, self.text, state.pos)
                child.find_next()
                self.children.append(child)
            elif isinstance(state, Valid):
                self._end = state.end
                return
            else:
                self._step()

    # ---- Pattern extraction ----
    def pattern(self) -> Pattern:
        return Pattern(self.variant, tuple(c.pattern() for c in self.children))

    def pattern_with(self, out: List[int]) -> None:
        out.append(self.variant)
        for child in self.children:
            child.pattern_with(out)

    def flat_pattern(self) -> List[int]:
        out: List[int] = []
        self.pattern_with(out)
        return out

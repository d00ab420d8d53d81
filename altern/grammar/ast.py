# altern/grammar/ast.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Tuple, Union

# ---- Grammar data model ----
# Rules refer to each other only through integer keys (RuleKey), never by
# object reference, so self- and mutually-recursive rules need no cycles.

RuleKey = int

@dataclass(frozen=True)
class Literal:
    text: str  # matched verbatim

@dataclass(frozen=True)
class Ref:
    key: RuleKey  # index of the referenced rule in the same Grammar

Term = Union[Literal, Ref]


@dataclass(frozen=True)
class Alternative:
    """One sequence of terms.

    `indices` holds the positions of every `Ref` term in `terms`, in order.
    It is derived once here so the matcher can find "the term after the n-th
    confirmed sub-match" without rescanning.
    """
    terms: Tuple[Term, ...]
    indices: Tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        terms = tuple(self.terms)
        object.__setattr__(self, "terms", terms)
        object.__setattr__(
            self, "indices",
            tuple(i for i, t in enumerate(terms) if isinstance(t, Ref)),
        )

    @classmethod
    def of(cls, *terms: Term) -> "Alternative":
        return cls(terms)

    def term_cursor(self, n_children: int) -> int:
        """Position right after the term of the n-th confirmed sub-match (0 if none)."""
        if n_children == 0:
            return 0
        return self.indices[n_children - 1] + 1

    @property
    def ref_count(self) -> int:
        return len(self.indices)


@dataclass(frozen=True)
class Rule:
    alternatives: Tuple[Alternative, ...]  # declaration order == priority

    def __post_init__(self) -> None:
        object.__setattr__(self, "alternatives", tuple(self.alternatives))

    @classmethod
    def of(cls, *alternatives: Alternative) -> "Rule":
        return cls(alternatives)


@dataclass(frozen=True)
class Grammar:
    rules: Tuple[Rule, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", tuple(self.rules))

    def __getitem__(self, key: RuleKey) -> Rule:
        # well-formedness is the caller's job; a bad key is a plain IndexError
        return self.rules[key]

    def __len__(self) -> int:
        return len(self.rules)

    def alternative_count(self) -> int:
        return sum(len(r.alternatives) for r in self.rules)

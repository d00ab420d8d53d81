# altern/match/runtime.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, List, Optional

from ..grammar.ast import Grammar, Literal, RuleKey
from ..grammar.parser import GrammarDef, parse_grammar
from .engine import PatternMatcher
from .pattern import Pattern


@dataclass(frozen=True)
class Match:
    """One successful derivation, detached from the matcher that found it."""
    pattern: Pattern
    text: str
    start: int
    end: int

    @property
    def consumed(self) -> str:
        return self.text[self.start:self.end]

    @property
    def leftover(self) -> str:
        return self.text[self.end:]


def iter_matches(grammar: Grammar, key: RuleKey, text: str, pos: int = 0,
                 limit: Optional[int] = None) -> Iterator[Match]:
    """Yield every derivation of rule `key` at `text[pos:]` in priority order.

    `limit` caps the number of matches; the engine has no cycle detection, so
    callers enumerating ambiguous or recursive grammars should pass one.
    """
    if limit is not None and limit <= 0:
        return
    m = PatternMatcher(grammar, key, text, pos)
    count = 0
    while True:
        m.find_next()
        if m.is_exhausted:
            return
        yield Match(m.pattern(), text, pos, m.end)
        count += 1
        if limit is not None and count >= limit:
            return


def expand(grammar: Grammar, key: RuleKey, pattern: Pattern) -> str:
    """Rebuild the text a pattern derives: literals and sub-expansions in term order."""
    alt = grammar[key].alternatives[pattern.variant]
    parts: List[str] = []
    children = iter(pattern.children)
    for term in alt.terms:
        if isinstance(term, Literal):
            parts.append(term.text)
        else:
            parts.append(expand(grammar, term.key, next(children)))
    return "".join(parts)


@dataclass
class MatchProgram:
    """Parsed grammar ready for matching."""
    grammar_def: GrammarDef

    @classmethod
    def from_source(cls, src: str) -> "MatchProgram":
        return cls(parse_grammar(src))

    @property
    def grammar(self) -> Grammar:
        return self.grammar_def.grammar

    def key_of(self, rule_name: Optional[str]) -> RuleKey:
        if rule_name is None:
            return self.grammar_def.start_key
        try:
            return self.grammar_def.symbols.key_of(rule_name)
        except KeyError:
            raise KeyError(f"undefined rule '{rule_name}'")


class MatchRunner:
    """Enumerate derivations of a named rule (default: the %start rule)."""
    def __init__(self, program: MatchProgram):
        self.program = program

    def iter(self, rule_name: Optional[str], text: str, pos: int = 0,
             limit: Optional[int] = None) -> Iterator[Match]:
        key = self.program.key_of(rule_name)
        return iter_matches(self.program.grammar, key, text, pos, limit)

    def run(self, rule_name: Optional[str], text: str, pos: int = 0,
            limit: Optional[int] = None) -> List[Match]:
        return list(self.iter(rule_name, text, pos, limit))

# altern/__init__.py
"""altern — enumerate, in priority order, every way a grammar of ordered
alternatives matches a prefix of an input string.

    >>> prog = MatchProgram.from_source('S : "a" X ; X : "b" | "bc" ;')
    >>> [m.consumed for m in MatchRunner(prog).iter(None, "abc")]
    ['ab', 'abc']
"""

__version__ = "0.1.0"

from .grammar import (
    Literal, Ref, Term, Alternative, Rule, Grammar, RuleKey,
    RuleTable, GrammarDef, parse_grammar, load_grammar, load_grammar_text,
)
from .match import (
    PatternMatcher, Pattern, Match, MatchProgram, MatchRunner,
    iter_matches, expand,
)

# altern/grammar/__init__.py
"""Grammar data model and the `.g` text notation.

- ast     : Literal / Ref terms, Alternative, Rule, Grammar (immutable, key-indexed)
- symbols : RuleTable, rule name <-> RuleKey
- parser  : parse_grammar(src) -> GrammarDef
- loader  : read a `.g` file from disk
"""

from .ast import Literal, Ref, Term, Alternative, Rule, Grammar, RuleKey
from .symbols import RuleTable
from .parser import GrammarDef, parse_grammar
from .loader import load_grammar, load_grammar_text

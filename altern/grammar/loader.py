"""간단한 .g 파일 로더"""

from __future__ import annotations
from pathlib    import Path
from typing     import Union

from .parser    import GrammarDef, parse_grammar


def load_grammar_text(path: Union[str, Path]) -> str:
    """UTF-8로 읽고 개행을 '\\n'으로 통일합니다."""
    text = Path(path).read_text(encoding="utf-8")
    return text.replace("\r\n", "\n").replace("\r", "\n")


def load_grammar(path: Union[str, Path]) -> GrammarDef:
    return parse_grammar(load_grammar_text(path))

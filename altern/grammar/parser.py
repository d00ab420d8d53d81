"""altern 문법 표기 파서
- %start RuleName ;          (생략하면 첫 번째 규칙)
- 규칙: RuleName : alt | alt ... ;
- 대안(alt): "literal" / 'literal' / RuleName 의 나열 (비어 있으면 빈 문자열 매칭)
- 주석: // ... , /* ... */
- 세미콜론(;)은 모든 선언/규칙 종료에 **반드시 필요**

규칙 키(RuleKey)는 선언 순서대로 배정되며, 참조는 앞/뒤/순환 모두 허용합니다.
"""

from __future__ import annotations
import regex as re
import ast as _pyast
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from .ast import Alternative, Grammar, Literal, Ref, Rule, RuleKey, Term
from .symbols import RuleTable

# ---- Lexer 토큰 ----
_TOKEN_SPEC = [
    ("WS",       r"[ \t\f\r]+"),
    ("NEWLINE",  r"\n"),
    ("COMMENT",  r"//[^\n]*"),
    ("MCOMMENT", r"/\*.*?\*/"),
    ("PERCENT",  r"%"),
    ("COLON",    r":"),
    ("SEMI",     r";"),
    ("OR",       r"\|"),
    ("STRING",   r'"(?:\\.|[^"\\\n])*"'),
    ("SSTRING",  r"'(?:\\.|[^'\\\n])*'"),
    ("IDENT",    r"[\p{XID_Start}_]\p{XID_Continue}*"),
]
MASTER_RE = re.compile("|".join(f"(?P<{n}>{p})" for n, p in _TOKEN_SPEC), re.S)

_SKIP = ("WS", "NEWLINE", "COMMENT", "MCOMMENT")


@dataclass
class Tok:
    kind: str
    lexeme: str
    start: int
    end: int
    line: int
    col: int


@dataclass
class GrammarDef:
    """파싱 결과: 불변 Grammar + 이름 테이블 + 시작 규칙 이름."""
    grammar: Grammar
    symbols: RuleTable
    start: str

    @property
    def start_key(self) -> RuleKey:
        return self.symbols.key_of(self.start)


def _scan(src: str) -> List[Tok]:
    """공백/개행/주석은 줄·칼럼 갱신만 하고 토큰스트림에는 넣지 않는다."""
    toks: List[Tok] = []
    line = col = 1
    i = 0
    while i < len(src):
        m = MASTER_RE.match(src, i)
        if not m:
            if src.startswith("/*", i):
                raise SyntaxError(f"Unclosed block comment at {line}:{col}\n{_snippet_caret_at_pos(src, i)}")
            raise SyntaxError(f"Unexpected char {src[i]!r} at {line}:{col}\n{_snippet_caret_at_pos(src, i)}")
        kind = m.lastgroup or ""
        lex = m.group(0)
        if kind not in _SKIP:
            toks.append(Tok(kind, lex, i, m.end(), line, col))

        nl_count = lex.count("\n")
        if nl_count:
            line += nl_count
            col = len(lex) - lex.rfind("\n")
        else:
            col += len(lex)
        i = m.end()

    toks.append(Tok("EOF", "", len(src), len(src), line, col))
    return toks


# ---------- error handling utils ----------
def _line_bounds(src: str, pos: int) -> Tuple[int, int]:
    """pos가 속한 라인의 [시작, 끝) 범위"""
    start = src.rfind("\n", 0, pos) + 1
    end = src.find("\n", pos)
    if end == -1:
        end = len(src)
    return start, end

def _snippet_caret_at_pos(src: str, pos: int) -> str:
    start, end = _line_bounds(src, pos)
    return f"{src[start:end]}\n{' ' * (pos - start)}^"

def _snippet_with_caret(src: str, tok: Tok) -> str:
    return _snippet_caret_at_pos(src, tok.start)

def _error_at(src: str, tok: Tok, msg: str) -> SyntaxError:
    return SyntaxError(f"{msg} at {tok.line}:{tok.col}\n{_snippet_with_caret(src, tok)}")


# --- 토큰 스트림 ---
class _TS:
    def __init__(self, toks: List[Tok], src: str):
        self.toks = toks
        self.i = 0
        self.src = src

    def la(self) -> Tok:
        return self.toks[self.i]

    def prev(self) -> Tok:
        return self.toks[self.i - 1]

    def eat(self, kind: str) -> Tok:
        t = self.la()
        if t.kind != kind:
            raise _error_at(self.src, t, f"Expected {kind}, got {t.kind}")
        self.i += 1
        return t

    def match(self, kind: str) -> Optional[Tok]:
        if self.la().kind == kind:
            return self.eat(kind)
        return None


def _unquote(s: str) -> str:
    # 따옴표 포함 원문. 이스케이프는 파이썬 리터럴 규칙으로 복원.
    return _pyast.literal_eval(s)

def _require_semi(ts: _TS, context: str, example: str, anchor: Tok) -> None:
    """세미콜론 강제. 캐럿은 직전 토큰(anchor)의 끝 위치에 찍는다."""
    if ts.match("SEMI"):
        return
    got = ts.la()
    found = "EOF" if got.kind == "EOF" else got.kind
    raise SyntaxError(
        f"Missing ';' after {context} (semicolon is mandatory).\n"
        f"- Found: {found} at {got.line}:{got.col}\n"
        f"- Example: {example}\n\n"
        f"{_snippet_caret_at_pos(ts.src, anchor.end)}"
    )


# 파싱 중의 대안: 리터럴은 바로 Literal, 규칙 참조는 이름 해석 전까지 Tok로 보관
_RawItem = Union[Literal, Tok]
_RawAlt = List[_RawItem]


def _parse_alts(ts: _TS) -> List[_RawAlt]:
    alts = [_parse_seq(ts)]
    while ts.match("OR"):
        alts.append(_parse_seq(ts))
    return alts

def _parse_seq(ts: _TS) -> _RawAlt:
    items: _RawAlt = []
    while True:
        t = ts.la()
        if t.kind == "IDENT":
            items.append(ts.eat("IDENT"))
        elif t.kind in ("STRING", "SSTRING"):
            tok = ts.eat(t.kind)
            try:
                text = _unquote(tok.lexeme)
            except (SyntaxError, ValueError) as e:
                # 스캐너는 임의의 \. 를 허용하므로 잘못된 이스케이프는 여기서 걸러진다
                raise _error_at(ts.src, tok, f"Invalid string literal {tok.lexeme}") from e
            items.append(Literal(text))
        else:
            return items

def _resolve(ts: _TS, symbols: RuleTable, item: _RawItem) -> Term:
    if isinstance(item, Literal):
        return item
    if item.lexeme not in symbols:
        raise _error_at(ts.src, item, f"Undefined rule '{item.lexeme}'")
    return Ref(symbols.key_of(item.lexeme))


# --- Grammar Parsing ---
def parse_grammar(src: str) -> GrammarDef:
    ts = _TS(_scan(src), src)
    start_tok: Optional[Tok] = None

    # 선언부
    while ts.la().kind == "PERCENT":
        ts.eat("PERCENT")
        look = ts.la()
        if look.kind != "IDENT":
            raise _error_at(src, look, f"Expected directive name after '%', got {look.kind}")
        ident_tok = ts.eat("IDENT")
        if ident_tok.lexeme == "start":
            start_tok = ts.eat("IDENT")
            _require_semi(ts, "%start declaration", "%start StartRule;", anchor=start_tok)
        else:
            raise _error_at(src, ident_tok, f"Unknown directive %{ident_tok.lexeme}")

    # 규칙부
    raw: List[Tuple[Tok, List[_RawAlt]]] = []
    defined = set()
    while ts.la().kind != "EOF":
        lhs_tok = ts.eat("IDENT")
        lhs = lhs_tok.lexeme
        if lhs in defined:
            raise _error_at(src, lhs_tok, f"Duplicate definition of rule '{lhs}'")
        defined.add(lhs)
        ts.eat("COLON")
        alts = _parse_alts(ts)
        _require_semi(ts, f"rule '{lhs}'", f"{lhs} : ... ;", anchor=ts.prev())
        raw.append((lhs_tok, alts))

    if not raw:
        raise SyntaxError("Grammar has no rules (expected at least one 'Name : ... ;')")

    symbols = RuleTable()
    symbols.freeze(tok.lexeme for tok, _alts in raw)

    rules = []
    for _lhs_tok, alts in raw:
        rules.append(Rule(tuple(
            Alternative(tuple(_resolve(ts, symbols, item) for item in seq))
            for seq in alts
        )))

    if start_tok is None:
        start = raw[0][0].lexeme
    else:
        start = start_tok.lexeme
        if start not in symbols:
            raise _error_at(src, start_tok, f"%start refers to undefined rule '{start}'")

    return GrammarDef(Grammar(tuple(rules)), symbols, start)

# altern/alternc.py
"""alternc – altern CLI

사용 예)
    $ python -m altern.alternc check altern/tests/grammar_test/funpar.g -D
    $ python -m altern.alternc match altern/tests/grammar_test/funpar.g --text "f(x, y)" --tree
    $ python -m altern.alternc match grammar.g --input data.txt --start Expr --limit 20

기능
----
- check : 문법을 읽어 규칙/대안 수와 시작 규칙을 요약 출력
- match : 시작 규칙(또는 --start)으로 입력 앞부분에 대한 모든 유도를 우선순위 순서로 나열

디버그 모드(-D/--debug)를 켜면 규칙 테이블과 진행 상황을 stderr로 출력합니다.
종료 코드: 0 성공, 1 매칭 없음(match), 2 문법/입출력 오류 또는 재귀 한도 초과(좌재귀 등).
"""

from __future__ import annotations
import argparse
import sys
from typing import List, Optional

from .grammar.ast import Grammar, Literal, RuleKey
from .grammar.parser import GrammarDef
from .match.pattern import Pattern

# ------------------------------
# 헬퍼
# ------------------------------

def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)


def _load(path: str, debug: bool) -> GrammarDef:
    from .grammar.loader import load_grammar
    gdef = load_grammar(path)
    if debug:
        _eprint("[DEBUG] Grammar ready | rules=%d alternatives=%d start=%s" %
                (len(gdef.grammar), gdef.grammar.alternative_count(), gdef.start))
    return gdef


def _format_alternative(gdef: GrammarDef, key: RuleKey, variant: int) -> str:
    alt = gdef.grammar[key].alternatives[variant]
    parts = []
    for term in alt.terms:
        if isinstance(term, Literal):
            parts.append(repr(term.text))
        else:
            parts.append(gdef.symbols.name_of(term.key))
    return " ".join(parts) if parts else "ε"


def _print_rule_table(gdef: GrammarDef) -> None:
    _eprint("\n[Rules]")
    for key, name in enumerate(gdef.symbols.names):
        for variant in range(len(gdef.grammar[key].alternatives)):
            _eprint(f"  {key:>3} {name}#{variant} : {_format_alternative(gdef, key, variant)}")


def _format_tree(grammar: Grammar, names: List[str], key: RuleKey,
                 pattern: Pattern, depth: int = 0) -> List[str]:
    """유도 트리를 'NAME#variant' 줄 목록으로 (깊이만큼 들여쓰기)."""
    lines = [f"{'  ' * depth}{names[key]}#{pattern.variant}"]
    alt = grammar[key].alternatives[pattern.variant]
    for idx, child in zip(alt.indices, pattern.children):
        lines.extend(_format_tree(grammar, names, alt.terms[idx].key, child, depth + 1))
    return lines

# ------------------------------
# 커맨드 구현
# ------------------------------

def cmd_check(args) -> int:
    try:
        gdef = _load(args.file, debug=args.debug)
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
        return 2
    except Exception as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    if args.debug:
        _print_rule_table(gdef)

    print(f"[CHECK OK] rules={len(gdef.grammar)} alternatives={gdef.grammar.alternative_count()} start={gdef.start}")
    return 0


def cmd_match(args) -> int:
    from .match.runtime import MatchProgram, MatchRunner
    try:
        gdef = _load(args.file, debug=args.debug)
        if args.text is not None:
            text = args.text
        else:
            with open(args.input, "r", encoding="utf-8") as f:
                text = f.read()
        program = MatchProgram(gdef)
        key = program.key_of(args.start)
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
        return 2
    except Exception as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    if args.debug:
        _print_rule_table(gdef)
        _eprint(f"[DEBUG] matching rule={gdef.symbols.name_of(key)} input_len={len(text)} limit={args.limit}")

    names = list(gdef.symbols.names)
    count = 0
    try:
        for m in MatchRunner(program).iter(args.start, text, limit=args.limit):
            print(f"{count:03d}: {m.pattern.flatten()}  consumed={m.consumed!r}  leftover={m.leftover!r}")
            if args.tree:
                for line in _format_tree(gdef.grammar, names, key, m.pattern):
                    print("     " + line)
            count += 1
    except RecursionError as e:
        # 좌재귀 등 입력을 소비하지 않는 재귀는 엔진이 검출하지 않는다
        _eprint("[ERROR]", type(e).__name__, str(e))
        _eprint("(hint) a rule may re-enter itself without consuming input, e.g. left recursion")
        return 2

    if args.debug:
        _eprint(f"[DEBUG] derivations={count}")
    if count == 0:
        print("[NO MATCH]")
        return 1
    return 0

# ------------------------------
# 엔트리포인트
# ------------------------------

def _positive_int(s: str) -> int:
    n = int(s)
    if n <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {s!r}")
    return n


def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="alternc", description="altern pattern matcher CLI")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_check = sub.add_parser("check", help="문법을 읽고 규칙 요약을 출력합니다")
    p_check.add_argument("file", help=".g 문법 파일")
    p_check.add_argument("-D", "--debug", action="store_true", help="디버그 정보를 상세 출력")
    p_check.set_defaults(func=cmd_check)

    p_match = sub.add_parser("match", help="입력 앞부분에 대한 모든 유도를 우선순위 순서로 나열합니다")
    p_match.add_argument("file", help=".g 문법 파일")
    src_group = p_match.add_mutually_exclusive_group(required=True)
    src_group.add_argument("--text", help="직접 입력 텍스트")
    src_group.add_argument("--input", help="입력 텍스트 파일 경로")
    p_match.add_argument("--start", help="시작 규칙 이름(미지정시 %%start 또는 첫 규칙)")
    p_match.add_argument("--limit", type=_positive_int, help="최대 유도 개수(재귀 문법에서 열거를 끊을 때)")
    p_match.add_argument("--tree", action="store_true", help="유도 트리도 함께 출력")
    p_match.add_argument("-D", "--debug", action="store_true", help="디버그 정보를 상세 출력")
    p_match.set_defaults(func=cmd_match)

    args = ap.parse_args(argv)
    return int(args.func(args))

if __name__ == "__main__":
    sys.exit(main())

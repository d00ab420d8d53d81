"""규칙 이름에 정수 키(RuleKey)를 부여해 Grammar 인덱스와 맞춥니다."""
from __future__     import annotations
from dataclasses    import dataclass
from typing         import Dict, Iterable, List, Tuple


@dataclass
class RuleTable:
    """
    RuleTable
    =========
    규칙 **이름 ↔ RuleKey 매핑**을 관리하는 테이블입니다.
    RuleKey는 곧 Grammar.rules 안의 인덱스이므로, 파서가 규칙을 모은 순서
    그대로 '고정(freeze)'한 뒤에만 사용합니다.

    설계 원칙
    --------
    - 키는 **선언 순서**로 0 .. N-1 을 배정합니다(정렬하지 않음).
    - freeze() 이후에는 이름↔키 매핑이 **불변**입니다.
    - 키는 재사용/재배정되지 않습니다.

    주요 속성/메서드
    ----------------
    - freeze(names): 선언 순서대로 테이블을 확정
    - key_of(name) / name_of(key): 이름 ↔ 키 변환
    - names: 키 순서의 이름 튜플
    """

    _name_to_key: Dict[str, int] = None
    _key_to_name: List[str] = None
    _frozen: bool = False

    def freeze(self, names: Iterable[str]) -> None:
        """선언 순서대로 키를 배정하고 테이블을 '고정'합니다. 두 번째 호출은 무시."""
        if self._frozen:
            return

        self._name_to_key = {}
        self._key_to_name = []
        for nm in names:
            if nm in self._name_to_key:
                raise ValueError(f"duplicate rule name {nm!r}")
            self._name_to_key[nm] = len(self._key_to_name)
            self._key_to_name.append(nm)

        self._frozen = True

    # ----- 조회 / 유틸 -----
    def key_of(self, name: str) -> int:
        """규칙 이름을 키로 변환합니다. 존재하지 않으면 KeyError."""
        return self._name_to_key[name]

    def name_of(self, key: int) -> str:
        """키를 규칙 이름으로 변환합니다. 범위를 벗어나면 IndexError."""
        return self._key_to_name[key]

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self._key_to_name or ())

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, name: object) -> bool:
        return bool(self._name_to_key) and name in self._name_to_key

    def __len__(self) -> int:
        return len(self._key_to_name or ())

    def __repr__(self) -> str:
        pairs = ", ".join(f"{k}:{nm}" for k, nm in enumerate(self.names))
        return f"RuleTable({pairs})"

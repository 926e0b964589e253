"""
gitcmp - Ref 集合比较 (Ref Set Differ)

纯函数实现：从两个不被修改的输入映射构建三个全新的输出集合。
"""

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class RefMismatch:
    """同名 ref 在两边指向不同的哈希。"""

    name: str
    hash_a: str
    hash_b: str


@dataclass(frozen=True)
class DiffResult:
    """两个 RefSet 的比较结果，三个集合互不相交，且均按 ref 名排序。

    Attributes:
        mismatched: 两边都有但哈希不同的 ref。
        only_in_a: 只在 A 中出现的 ref 名。
        only_in_b: 只在 B 中出现的 ref 名。
    """

    mismatched: tuple[RefMismatch, ...] = ()
    only_in_a: tuple[str, ...] = ()
    only_in_b: tuple[str, ...] = ()

    @property
    def identical(self) -> bool:
        """两边的 ref 完全一致时为 True。"""
        return not (self.mismatched or self.only_in_a or self.only_in_b)


def diff_refs(a: Mapping[str, str], b: Mapping[str, str]) -> DiffResult:
    """比较两个 RefSet。

    哈希相同的同名 ref 视为已对齐，不出现在任何输出集合中。
    """
    mismatched = tuple(
        RefMismatch(name, a[name], b[name])
        for name in sorted(a.keys() & b.keys())
        if a[name] != b[name]
    )
    return DiffResult(
        mismatched=mismatched,
        only_in_a=tuple(sorted(a.keys() - b.keys())),
        only_in_b=tuple(sorted(b.keys() - a.keys())),
    )

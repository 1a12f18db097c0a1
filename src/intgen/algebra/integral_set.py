"""有序去重积分集合

闭包驱动器的结果保存在 :class:`IntegralSet` 中：按描述符的全序关系迭代，
因此相同内容的集合在任意运行中都给出相同的枚举顺序与索引。
"""

from __future__ import annotations

from intgen.algebra.integral import I2CIntegral, I4CIntegral, Integral

__all__ = ["IntegralSet", "SI2CIntegrals", "SI4CIntegrals"]


class IntegralSet:
    """按全序迭代的积分描述符集合。

    Parameters
    ----------
    integrals : iterable of Integral, optional
        初始元素。
    """

    item_type: type = Integral

    def __init__(self, integrals=()):
        self._items: set = set()
        self._sorted: list | None = None
        self.update(integrals)

    def _check(self, integral) -> None:
        if not isinstance(integral, self.item_type):
            raise TypeError(
                f"{type(self).__name__} 只接受 {self.item_type.__name__}，"
                f"实际: {type(integral).__name__}"
            )

    def add(self, integral) -> None:
        self._check(integral)
        if integral not in self._items:
            self._items.add(integral)
            self._sorted = None

    def update(self, integrals) -> None:
        for integral in integrals:
            self.add(integral)

    def union(self, other) -> "IntegralSet":
        result = type(self)(self._items)
        result.update(other)
        return result

    def copy(self) -> "IntegralSet":
        return type(self)(self._items)

    def to_list(self) -> list:
        if self._sorted is None:
            self._sorted = sorted(self._items)
        return list(self._sorted)

    def index(self, integral) -> int:
        """积分在有序枚举中的位置；不存在时抛出 ``ValueError``。"""
        return self.to_list().index(integral)

    def __iter__(self):
        return iter(self.to_list())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, integral) -> bool:
        return integral in self._items

    def __eq__(self, other) -> bool:
        if isinstance(other, IntegralSet):
            return self._items == other._items
        if isinstance(other, (set, frozenset)):
            return self._items == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"{type(self).__name__}({[i.label(True) for i in self]})"


class SI2CIntegrals(IntegralSet):
    item_type = I2CIntegral


class SI4CIntegrals(IntegralSet):
    item_type = I4CIntegral

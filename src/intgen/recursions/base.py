r"""递推驱动器公共框架

项层驱动器（``T*`` 类）
=======================

每个单步递推函数 ``step(term, axis)`` 返回一步展开的 :class:`RecursionDist`，
或在不适用时返回 ``None``（非法平移、守卫拒绝、已到终端）。
:meth:`TermDriver._expand` 对单步函数做递归展开，直到所有项都是终端项：

- 单步展开在 x、y、z 三个方向中选择项数最少者，相同项数时按 x、y、z 优先；
- 以积分分量为键缓存完整展开结果，先查缓存再递归，避免同一子积分被重复展开。

阶段写作 ``(名称, 单步函数)``；第三个元素为 ``False`` 时单步函数没有坐标轴可选，
按 ``step(term)`` 直接调用（如几何导数前缀沿其主轴消去）。

描述符层驱动器（``V*`` 类）
===========================

单步函数 ``step(integral)`` 返回所需的低阶描述符集合（终端时为空），
:meth:`IntegralDriver._closure` 以工作表方式求传递闭包。每一步都严格降低
（角动量 + 待消去前缀阶数）这一良基度量，因此闭包必然终止。
"""

from __future__ import annotations

from intgen.algebra.integral_set import IntegralSet
from intgen.algebra.recursion import RecursionDist, RecursionTerm
from intgen.algebra.tensor import AXES

__all__ = [
    "select_minimal",
    "TermDriver",
    "IntegralDriver",
]


def select_minimal(dists) -> RecursionDist | None:
    """返回项数最少的分布（忽略 ``None``，并列时取先出现者）。"""
    best = None
    for dist in dists:
        if dist is None:
            continue
        if best is None or len(dist) < len(best):
            best = dist
    return best


class TermDriver:
    """项层递推驱动器基类。"""

    def __init__(self):
        self._caches: dict[str, dict] = {}

    def clear(self) -> None:
        """清空展开缓存。"""
        self._caches.clear()

    def _best_step(self, step, term: RecursionTerm) -> RecursionDist | None:
        return select_minimal(step(term, axis) for axis in AXES)

    def _expand(
        self, term: RecursionTerm, name: str, step, per_axis: bool = True
    ) -> list[RecursionTerm]:
        cache = self._caches.setdefault(name, {})
        comp = term.integral
        leaves = cache.get(comp)
        if leaves is None:
            unit = RecursionTerm(comp)
            dist = self._best_step(step, unit) if per_axis else step(unit)
            if dist is None:
                leaves = [unit]
            else:
                collected = RecursionDist(unit)
                for sub in dist:
                    for leaf in self._expand(sub, name, step, per_axis):
                        collected.add(leaf)
                leaves = collected.simplify().terms()
            cache[comp] = leaves
        return [leaf.times(term) for leaf in leaves]

    def _apply(self, term: RecursionTerm, stages) -> RecursionDist:
        """依次执行各阶段，每阶段展开至该阶段的终端项。"""
        terms = [term]
        for name, step, *flags in stages:
            per_axis = flags[0] if flags else True
            dist = RecursionDist(term)
            for sub in terms:
                for leaf in self._expand(sub, name, step, per_axis):
                    dist.add(leaf)
            terms = dist.simplify().terms()
        dist = RecursionDist(term)
        for sub in terms:
            dist.add(sub)
        return dist


class IntegralDriver:
    """描述符层闭包驱动器基类。"""

    set_type: type = IntegralSet

    def _closure(self, integrals, step) -> IntegralSet:
        result = self.set_type(integrals)
        work = list(result)
        while work:
            integral = work.pop()
            for sub in step(integral):
                if sub not in result:
                    result.add(sub)
                    work.append(sub)
        return result

    def _staged_closure(self, integrals, steps) -> IntegralSet:
        result = self.set_type(integrals)
        for step in steps:
            result = self._closure(result, step)
        return result

    @staticmethod
    def _valid(*integrals) -> set:
        return {i for i in integrals if i is not None}

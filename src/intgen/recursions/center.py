r"""几何导数（中心前缀）递推

对中心 :math:`R` 上的笛卡尔高斯函数 :math:`G_{l}(\mathbf{r}; \alpha, R)`：

.. math::

    \frac{\partial}{\partial R_i} G_{l} = 2\alpha\, G_{l+1_i} - N_i(l)\, G_{l-1_i}

前缀按其 ``primary()`` 轴逐阶消去，每一步把一阶导数转化为高一阶与低一阶的无导数积分。
中心按逆序处理（四中心 D、C、B、A；两中心 B、A），最终结果不含任何前缀，
随后交给对应算符族的驱动器继续展开。
"""

from __future__ import annotations

from functools import partial

from intgen.algebra.integral_set import SI2CIntegrals, SI4CIntegrals
from intgen.algebra.recursion import RecursionDist, RecursionTerm
from intgen.recursions.base import IntegralDriver, TermDriver
from intgen.recursions.factors import EXPONENTS

__all__ = [
    "T2CCenterDriver",
    "T4CCenterDriver",
    "V2ICenterDriver",
    "V4ICenterDriver",
]


class _TermCenterDriver(TermDriver):
    n_centers = 0

    def is_geometric(self, term: RecursionTerm) -> bool:
        return len(term.integral.centers) == self.n_centers and bool(term.integral.prefixes)

    def bra_ket_vrr(self, term: RecursionTerm, center: int) -> RecursionDist | None:
        """消去中心 ``center`` 前缀的一阶（沿其主轴）。"""
        if not self.is_geometric(term):
            return None
        prefix = term.integral.prefixes[center]
        if prefix.order == 0:
            return None
        axis = prefix.shape.primary()
        tval = term.shift_prefix(axis, -1, center)
        dist = RecursionDist(term)
        dist.add(tval.shift(axis, 1, center).add(EXPONENTS[center], 2))
        lowered = tval.shift(axis, -1, center)
        if lowered is not None:
            dist.add(lowered.scale(-tval.integral[center][axis]))
        return dist

    def stages(self) -> list:
        """每个中心一个阶段；轴由前缀主轴决定，不做坐标轴选择。"""
        return [
            (f"geom_{center}", partial(self.bra_ket_vrr, center=center), False)
            for center in reversed(range(self.n_centers))
        ]

    def apply_bra_ket_vrr(self, term: RecursionTerm) -> RecursionDist:
        """消去全部前缀，得到无导数积分分量的线性组合。"""
        return self._apply(term, self.stages())


class T2CCenterDriver(_TermCenterDriver):
    """两中心积分几何导数项层驱动器。"""

    n_centers = 2


class T4CCenterDriver(_TermCenterDriver):
    """四中心积分几何导数项层驱动器。"""

    n_centers = 4


class _IntegralCenterDriver(IntegralDriver):
    n_centers = 0

    def bra_ket_vrr(self, integral, center: int) -> set:
        if integral.prefixes_order()[center] == 0:
            return set()
        tval = integral.shift_prefix(-1, center, keep_order=True)
        return self._valid(tval.shift(1, center), tval.shift(-1, center))

    def apply_bra_ket_vrr(self, integrals):
        """逐中心（逆序）消去前缀，返回全部无前缀终端积分。"""
        current = self.set_type(integrals)
        for center in reversed(range(self.n_centers)):
            expanded = self._closure(
                current, lambda integral, c=center: self.bra_ket_vrr(integral, c)
            )
            current = self.set_type(
                i for i in expanded if i.prefixes_order()[center] == 0
            )
        return self.set_type(i.reduce_prefixes() for i in current)


class V2ICenterDriver(_IntegralCenterDriver):
    """两中心积分几何导数描述符层驱动器。"""

    n_centers = 2
    set_type = SI2CIntegrals


class V4ICenterDriver(_IntegralCenterDriver):
    """四中心积分几何导数描述符层驱动器。"""

    n_centers = 4
    set_type = SI4CIntegrals

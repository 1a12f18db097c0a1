r"""重叠积分的 Obara–Saika 递推

.. math::

    (a+1_i|b) &= P_iA\,(a|b) + \frac{N_i(a)}{2\zeta}(a-1_i|b) + \frac{N_i(b)}{2\zeta}(a|b-1_i) \\
    (a|b+1_i) &= P_iB\,(a|b) + \frac{N_i(a)}{2\zeta}(a-1_i|b) + \frac{N_i(b)}{2\zeta}(a|b-1_i)

其中 :math:`P_iA = P_i - A_i`。先在 bra 上递推至 s，再在 ket 上递推，终端积分为 :math:`(s|1|s)`。

水平递推（HRR）在两个中心之间转移角动量，只用到中心间距：

.. math::

    (a+1_i|b) &= (a|b+1_i) + (B_i - A_i)\,(a|b) \\
    (a|b+1_i) &= (a+1_i|b) - (B_i - A_i)\,(a|b)

bra HRR 把 A 上的角动量全部移到 B（终端 :math:`(s|b)`），ket HRR 反之。

References
----------
.. [OS86] Obara, S. & Saika, A. (1986)
   "Efficient recursive computation of molecular integrals over Cartesian Gaussian functions"
   J. Chem. Phys. 84, 3963
"""

from __future__ import annotations

from fractions import Fraction

from intgen.algebra.integral_set import SI2CIntegrals
from intgen.algebra.operator import OVERLAP, OperatorComponent
from intgen.algebra.recursion import RecursionDist, RecursionTerm
from intgen.recursions.base import IntegralDriver, TermDriver
from intgen.recursions.factors import FI_AB, vector

__all__ = ["T2COverlapDriver", "V2IOverlapDriver"]


class T2COverlapDriver(TermDriver):
    """重叠积分项层驱动器。"""

    def is_overlap(self, term: RecursionTerm) -> bool:
        return term.integrand() == OperatorComponent(OVERLAP) and not term.integral.prefixes

    def bra_vrr(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        """降低 bra 中心角动量一步。"""
        if not self.is_overlap(term):
            return None
        tval = term.shift(axis, -1, 0)
        if tval is None:
            return None
        dist = RecursionDist(term)
        dist.add(tval.add(vector("PA", axis)))
        self._add_lowered(dist, tval, axis)
        return dist

    def ket_vrr(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        """降低 ket 中心角动量一步。"""
        if not self.is_overlap(term):
            return None
        tval = term.shift(axis, -1, 1)
        if tval is None:
            return None
        dist = RecursionDist(term)
        dist.add(tval.add(vector("PB", axis)))
        self._add_lowered(dist, tval, axis)
        return dist

    def _hrr(self, term: RecursionTerm, axis: str, center: int) -> RecursionDist | None:
        if not self.is_overlap(term):
            return None
        tval = term.shift(axis, -1, center)
        if tval is None:
            return None
        dist = RecursionDist(term)
        dist.add(tval.shift(axis, 1, 1 - center))
        dist.add(tval.add(vector("BA", axis), 1 if center == 0 else -1))
        return dist

    def bra_hrr(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        """A 降一阶、B 升一阶。"""
        return self._hrr(term, axis, 0)

    def ket_hrr(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        """B 降一阶、A 升一阶。"""
        return self._hrr(term, axis, 1)

    @staticmethod
    def _add_lowered(dist: RecursionDist, tval: RecursionTerm, axis: str) -> None:
        for center in (0, 1):
            n = tval.integral[center][axis]
            lowered = tval.shift(axis, -1, center)
            if lowered is not None:
                dist.add(lowered.add(FI_AB, Fraction(n, 2)))

    def stages(self) -> list:
        return [("ovl_bra", self.bra_vrr), ("ovl_ket", self.ket_vrr)]

    def apply_bra_vrr(self, term: RecursionTerm) -> RecursionDist:
        return self._apply(term, self.stages()[:1])

    def apply_ket_vrr(self, term: RecursionTerm) -> RecursionDist:
        return self._apply(term, self.stages()[1:])

    def apply_bra_hrr(self, term: RecursionTerm) -> RecursionDist:
        """展开至 :math:`(s|b)` 形式的重叠积分。"""
        return self._apply(term, [("ovl_bra_hrr", self.bra_hrr)])

    def apply_ket_hrr(self, term: RecursionTerm) -> RecursionDist:
        return self._apply(term, [("ovl_ket_hrr", self.ket_hrr)])

    def apply_recursion(self, term: RecursionTerm) -> RecursionDist:
        """完全展开至 :math:`(s|1|s)`。"""
        return self._apply(term, self.stages())


class V2IOverlapDriver(IntegralDriver):
    """重叠积分描述符层闭包驱动器。"""

    set_type = SI2CIntegrals

    def is_overlap(self, integral) -> bool:
        return integral.integrand.name == OVERLAP and integral.is_simple()

    def bra_vrr(self, integral) -> set:
        if not self.is_overlap(integral) or integral[0] == 0:
            return set()
        tval = integral.shift(-1, 0)
        return self._valid(tval, tval.shift(-1, 0), tval.shift(-1, 1))

    def ket_vrr(self, integral) -> set:
        """bra 已降至 s 后的 ket 递推。"""
        if not self.is_overlap(integral) or integral[0] > 0 or integral[1] == 0:
            return set()
        tval = integral.shift(-1, 1)
        return self._valid(tval, tval.shift(-1, 0), tval.shift(-1, 1))

    def bra_hrr(self, integral) -> set:
        if not self.is_overlap(integral) or integral[0] == 0:
            return set()
        tval = integral.shift(-1, 0)
        return {tval, tval.shift(1, 1)}

    def ket_hrr(self, integral) -> set:
        if not self.is_overlap(integral) or integral[1] == 0:
            return set()
        tval = integral.shift(-1, 1)
        return {tval, tval.shift(1, 0)}

    def create_bra_hrr_recursion(self, integrals):
        return self._closure(integrals, self.bra_hrr)

    def create_ket_hrr_recursion(self, integrals):
        return self._closure(integrals, self.ket_hrr)

    def create_bra_vrr_recursion(self, integrals):
        return self._closure(integrals, self.bra_vrr)

    def create_ket_vrr_recursion(self, integrals):
        return self._closure(integrals, self.ket_vrr)

    def apply_recursion(self, integrals):
        return self._staged_closure(integrals, [self.bra_vrr, self.ket_vrr])

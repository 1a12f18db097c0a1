r"""核吸引（单点电荷势）积分的 Obara–Saika 递推

辅助积分 :math:`(a|A|b)^{(m)}` 满足

.. math::

    (a+1_i|A|b)^{(m)} &= P_iA\,(a|A|b)^{(m)} - P_iC\,(a|A|b)^{(m+1)} \\
        &+ \frac{N_i(a)}{2\zeta}\Big[(a-1_i|A|b)^{(m)} - (a-1_i|A|b)^{(m+1)}\Big] \\
        &+ \frac{N_i(b)}{2\zeta}\Big[(a|A|b-1_i)^{(m)} - (a|A|b-1_i)^{(m+1)}\Big]

ket 方向将 :math:`P_iA` 换为 :math:`P_iB`。终端为
:math:`(s|A|s)^{(m)} = \frac{2\pi}{\zeta} K_{AB} F_m(\zeta |PC|^2)`（Boys 函数，不在本包内求值）。
"""

from __future__ import annotations

from fractions import Fraction

from intgen.algebra.integral_set import SI2CIntegrals
from intgen.algebra.operator import NUCLEAR_POTENTIAL, OVERLAP, Operator, OperatorComponent
from intgen.algebra.recursion import RecursionDist, RecursionTerm
from intgen.recursions.base import IntegralDriver, TermDriver
from intgen.recursions.factors import FI_AB, vector

__all__ = ["T2CNuclearPotentialDriver", "V2INuclearPotentialDriver"]


class T2CNuclearPotentialDriver(TermDriver):
    """核吸引积分项层驱动器。"""

    def is_nuclear_potential(self, term: RecursionTerm) -> bool:
        return (
            term.integrand() == OperatorComponent(NUCLEAR_POTENTIAL)
            and not term.integral.prefixes
        )

    def _vrr(self, term: RecursionTerm, axis: str, center: int) -> RecursionDist | None:
        if not self.is_nuclear_potential(term):
            return None
        tval = term.shift(axis, -1, center)
        if tval is None:
            return None
        dist = RecursionDist(term)
        dist.add(tval.add(vector("PA" if center == 0 else "PB", axis)))
        dist.add(tval.shift_order(1).add(vector("PC", axis), -1))
        for other in (0, 1):
            n = tval.integral[other][axis]
            lowered = tval.shift(axis, -1, other)
            if lowered is not None:
                dist.add(lowered.add(FI_AB, Fraction(n, 2)))
                dist.add(lowered.shift_order(1).add(FI_AB, Fraction(-n, 2)))
        return dist

    def bra_vrr(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        return self._vrr(term, axis, 0)

    def ket_vrr(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        return self._vrr(term, axis, 1)

    def stages(self) -> list:
        return [("npot_bra", self.bra_vrr), ("npot_ket", self.ket_vrr)]

    def apply_recursion(self, term: RecursionTerm) -> RecursionDist:
        """完全展开至 :math:`(s|A|s)^{(m)}`。"""
        return self._apply(term, self.stages())


class V2INuclearPotentialDriver(IntegralDriver):
    """核吸引积分描述符层闭包驱动器。"""

    set_type = SI2CIntegrals

    def is_nuclear_potential(self, integral) -> bool:
        return integral.integrand.name == NUCLEAR_POTENTIAL and integral.is_simple()

    def _vrr(self, integral, center: int) -> set:
        tval = integral.shift(-1, center)
        result = set()
        for sub in self._valid(tval, tval.shift(-1, 0), tval.shift(-1, 1)):
            result.add(sub)
            result.add(sub.shift_order(1))
        return result

    def bra_vrr(self, integral) -> set:
        if not self.is_nuclear_potential(integral) or integral[0] == 0:
            return set()
        return self._vrr(integral, 0)

    def ket_vrr(self, integral) -> set:
        """bra 已降至 s 后的 ket 递推。"""
        if not self.is_nuclear_potential(integral) or integral[0] > 0 or integral[1] == 0:
            return set()
        return self._vrr(integral, 1)

    def aux_vrr(self, integral) -> set:
        """终端 :math:`(s|A|s)^{(m)}` 所依赖的重叠积分 :math:`(s|1|s)`。"""
        if not self.is_nuclear_potential(integral) or integral.total_order() > 0:
            return set()
        return {integral.replace(Operator(OVERLAP)).set_order(0)}

    def create_bra_vrr_recursion(self, integrals):
        return self._closure(integrals, self.bra_vrr)

    def create_ket_vrr_recursion(self, integrals):
        return self._closure(integrals, self.ket_vrr)

    def apply_recursion(self, integrals):
        return self._staged_closure(integrals, [self.bra_vrr, self.ket_vrr])

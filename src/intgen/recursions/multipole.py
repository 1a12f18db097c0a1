r"""多极矩积分的 Obara–Saika 递推

多极算符 :math:`M^{c} = (x-C_x)^{c_x}(y-C_y)^{c_y}(z-C_z)^{c_z}`：

.. math::

    (a+1_i|M^c|b) = P_iA\,(a|M^c|b) + \frac{1}{2\zeta}\Big[N_i(a)(a-1_i|M^c|b)
        + N_i(b)(a|M^c|b-1_i) + N_i(c)(a|M^{c-1_i}|b)\Big]

算符自身的递推（用于 :math:`a = b = 0`）：

.. math::

    (a|M^{c+1_i}|b) = P_iC\,(a|M^c|b) + \frac{1}{2\zeta}\Big[N_i(a)(a-1_i|M^c|b)
        + N_i(b)(a|M^c|b-1_i) + N_i(c)(a|M^{c-1_i}|b)\Big]

零阶算符替换为 ``"1"``，即普通重叠积分。
"""

from __future__ import annotations

from fractions import Fraction

from intgen.algebra.integral_set import SI2CIntegrals
from intgen.algebra.operator import MULTIPOLE, OVERLAP, Operator, OperatorComponent
from intgen.algebra.recursion import RecursionDist, RecursionTerm
from intgen.recursions.base import IntegralDriver, TermDriver
from intgen.recursions.factors import FI_AB, vector
from intgen.recursions.overlap import T2COverlapDriver, V2IOverlapDriver

__all__ = ["T2CMultipoleDriver", "V2IMultipoleDriver"]


def _reduce_operator(term: RecursionTerm | None) -> RecursionTerm | None:
    if term is not None and term.integrand().order == 0:
        return term.replace(OperatorComponent(OVERLAP))
    return term


class T2CMultipoleDriver(TermDriver):
    """多极矩积分项层驱动器。"""

    def __init__(self):
        super().__init__()
        self._overlap = T2COverlapDriver()

    def is_multipole(self, term: RecursionTerm) -> bool:
        return (
            term.integrand().name == MULTIPOLE
            and term.integrand().order > 0
            and not term.integral.prefixes
        )

    def _lowered_terms(self, dist: RecursionDist, tval: RecursionTerm, axis: str) -> None:
        for center in (0, 1):
            n = tval.integral[center][axis]
            lowered = tval.shift(axis, -1, center)
            if lowered is not None:
                dist.add(_reduce_operator(lowered).add(FI_AB, Fraction(n, 2)))
        n = tval.integrand().shape[axis]
        lowered = tval.shift_operator(axis, -1)
        if lowered is not None:
            dist.add(_reduce_operator(lowered).add(FI_AB, Fraction(n, 2)))

    def _vrr(self, term: RecursionTerm, axis: str, center: int) -> RecursionDist | None:
        if not self.is_multipole(term):
            return None
        tval = term.shift(axis, -1, center)
        if tval is None:
            return None
        dist = RecursionDist(term)
        dist.add(tval.add(vector("PA" if center == 0 else "PB", axis)))
        self._lowered_terms(dist, tval, axis)
        return dist

    def bra_vrr(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        return self._vrr(term, axis, 0)

    def ket_vrr(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        return self._vrr(term, axis, 1)

    def operator_vrr(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        """降低算符阶数一步。"""
        if not self.is_multipole(term):
            return None
        tval = term.shift_operator(axis, -1)
        if tval is None:
            return None
        dist = RecursionDist(term)
        dist.add(_reduce_operator(tval).add(vector("PC", axis)))
        self._lowered_terms(dist, tval, axis)
        return dist

    def stages(self) -> list:
        return [
            ("mpol_bra", self.bra_vrr),
            ("mpol_ket", self.ket_vrr),
            ("mpol_op", self.operator_vrr),
        ] + self._overlap.stages()

    def apply_recursion(self, term: RecursionTerm) -> RecursionDist:
        """完全展开至 :math:`(s|1|s)`。"""
        return self._apply(term, self.stages())


class V2IMultipoleDriver(IntegralDriver):
    """多极矩积分描述符层闭包驱动器。"""

    set_type = SI2CIntegrals

    def __init__(self):
        self._overlap = V2IOverlapDriver()

    def is_multipole(self, integral) -> bool:
        return (
            integral.integrand.name == MULTIPOLE
            and integral.integrand.order > 0
            and integral.is_simple()
        )

    @staticmethod
    def _reduce_operator(integral):
        if integral is not None and integral.integrand.order == 0:
            return integral.replace(Operator(OVERLAP))
        return integral

    def _siblings(self, tval) -> set:
        lowered = [tval.shift(-1, 0), tval.shift(-1, 1)]
        operator = tval.integrand.shift(-1)
        if operator is not None:
            lowered.append(tval.replace(operator))
        return self._valid(*(self._reduce_operator(i) for i in lowered))

    def bra_vrr(self, integral) -> set:
        if not self.is_multipole(integral) or integral[0] == 0:
            return set()
        tval = integral.shift(-1, 0)
        return self._siblings(tval) | {self._reduce_operator(tval)}

    def ket_vrr(self, integral) -> set:
        """bra 已降至 s 后的 ket 递推。"""
        if not self.is_multipole(integral) or integral[0] > 0 or integral[1] == 0:
            return set()
        tval = integral.shift(-1, 1)
        return self._siblings(tval) | {self._reduce_operator(tval)}

    def operator_vrr(self, integral) -> set:
        """角动量均为零后的算符递推。"""
        if not self.is_multipole(integral) or integral.total_order() > 0:
            return set()
        tval = integral.replace(integral.integrand.shift(-1))
        return self._siblings(tval) | {self._reduce_operator(tval)}

    def apply_recursion(self, integrals):
        result = self._staged_closure(
            integrals, [self.bra_vrr, self.ket_vrr, self.operator_vrr]
        )
        return self._overlap.apply_recursion(result)

r"""电场（点电荷势对场点坐标的导数）积分的 Obara–Saika 递推

电场积分定义为核吸引辅助积分对点电荷位置 :math:`C` 的导数：

.. math::

    (a|A^{e}|b)^{(m)} = \frac{\partial^{|e|}}{\partial C^{e}}\,(a|A|b)^{(m)}

一阶即电场分量（差一个负号），二阶为场梯度。对核吸引递推逐项求导得到

.. math::

    (a+1_i|A^e|b)^{(m)} &= P_iA\,(a|A^e|b)^{(m)} - P_iC\,(a|A^e|b)^{(m+1)} \\
        &+ \frac{N_i(a)}{2\zeta}\Big[(a-1_i|A^e|b)^{(m)} - (a-1_i|A^e|b)^{(m+1)}\Big] \\
        &+ \frac{N_i(b)}{2\zeta}\Big[(a|A^e|b-1_i)^{(m)} - (a|A^e|b-1_i)^{(m+1)}\Big]
        + N_i(e)\,(a|A^{e-1_i}|b)^{(m+1)}

角动量均为零后降低算符阶数：

.. math::

    (s|A^{e+1_i}|s)^{(m)} = 2\zeta\,P_iC\,(s|A^e|s)^{(m+1)} - 2\zeta\,N_i(e)\,(s|A^{e-1_i}|s)^{(m+1)}

零阶算符替换为核吸引 ``"A"``，剩余项交给
:class:`~intgen.recursions.nuclear_potential.T2CNuclearPotentialDriver`。
"""

from __future__ import annotations

from fractions import Fraction

from intgen.algebra.integral_set import SI2CIntegrals
from intgen.algebra.operator import (
    ELECTRIC_FIELD,
    NUCLEAR_POTENTIAL,
    Operator,
    OperatorComponent,
)
from intgen.algebra.recursion import RecursionDist, RecursionTerm
from intgen.recursions.base import IntegralDriver, TermDriver
from intgen.recursions.factors import FI_AB, ZETA, vector
from intgen.recursions.nuclear_potential import (
    T2CNuclearPotentialDriver,
    V2INuclearPotentialDriver,
)

__all__ = ["T2CElectricFieldDriver", "V2IElectricFieldDriver"]


def _reduce_operator(term: RecursionTerm) -> RecursionTerm:
    if term.integrand().order == 0:
        return term.replace(OperatorComponent(NUCLEAR_POTENTIAL))
    return term


class T2CElectricFieldDriver(TermDriver):
    """电场积分项层驱动器。"""

    def __init__(self):
        super().__init__()
        self._nuclear = T2CNuclearPotentialDriver()

    def is_electric_field(self, term: RecursionTerm) -> bool:
        return (
            term.integrand().name == ELECTRIC_FIELD
            and term.integrand().order > 0
            and not term.integral.prefixes
        )

    def _vrr(self, term: RecursionTerm, axis: str, center: int) -> RecursionDist | None:
        if not self.is_electric_field(term):
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
        lowered = tval.shift_operator(axis, -1)
        if lowered is not None:
            n = tval.integrand().shape[axis]
            dist.add(_reduce_operator(lowered.shift_order(1)).scale(n))
        return dist

    def bra_vrr(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        return self._vrr(term, axis, 0)

    def ket_vrr(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        return self._vrr(term, axis, 1)

    def operator_vrr(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        """:math:`(s|A^e|s)` 上降低算符阶数一步。"""
        if not self.is_electric_field(term):
            return None
        if term.integral[0].order > 0 or term.integral[1].order > 0:
            return None
        tval = term.shift_operator(axis, -1)
        if tval is None:
            return None
        dist = RecursionDist(term)
        dist.add(_reduce_operator(tval.shift_order(1)).add(ZETA, 2).add(vector("PC", axis)))
        lowered = tval.shift_operator(axis, -1)
        if lowered is not None:
            n = tval.integrand().shape[axis]
            dist.add(_reduce_operator(lowered.shift_order(1)).add(ZETA, -2 * n))
        return dist

    def stages(self) -> list:
        return [
            ("efld_bra", self.bra_vrr),
            ("efld_ket", self.ket_vrr),
            ("efld_op", self.operator_vrr),
        ] + self._nuclear.stages()

    def apply_recursion(self, term: RecursionTerm) -> RecursionDist:
        """完全展开至 :math:`(s|A|s)^{(m)}`。"""
        return self._apply(term, self.stages())


class V2IElectricFieldDriver(IntegralDriver):
    """电场积分描述符层闭包驱动器。"""

    set_type = SI2CIntegrals

    def __init__(self):
        self._nuclear = V2INuclearPotentialDriver()

    def is_electric_field(self, integral) -> bool:
        return (
            integral.integrand.name == ELECTRIC_FIELD
            and integral.integrand.order > 0
            and integral.is_simple()
        )

    @staticmethod
    def _reduce_operator(integral):
        if integral.integrand.order == 0:
            return integral.replace(Operator(NUCLEAR_POTENTIAL))
        return integral

    def _lowered_operator(self, integral, value: int):
        operator = integral.integrand.shift(value)
        if operator is None:
            return None
        return self._reduce_operator(integral.replace(operator).shift_order(1))

    def _vrr(self, integral, center: int) -> set:
        tval = integral.shift(-1, center)
        result = set()
        for sub in self._valid(tval, tval.shift(-1, 0), tval.shift(-1, 1)):
            result.add(sub)
            result.add(sub.shift_order(1))
        return result | self._valid(self._lowered_operator(tval, -1))

    def bra_vrr(self, integral) -> set:
        if not self.is_electric_field(integral) or integral[0] == 0:
            return set()
        return self._vrr(integral, 0)

    def ket_vrr(self, integral) -> set:
        """bra 已降至 s 后的 ket 递推。"""
        if not self.is_electric_field(integral) or integral[0] > 0 or integral[1] == 0:
            return set()
        return self._vrr(integral, 1)

    def operator_vrr(self, integral) -> set:
        """角动量均为零后的算符递推。"""
        if not self.is_electric_field(integral) or integral.total_order() > 0:
            return set()
        return self._valid(
            self._lowered_operator(integral, -1), self._lowered_operator(integral, -2)
        )

    def create_bra_vrr_recursion(self, integrals):
        return self._closure(integrals, self.bra_vrr)

    def create_ket_vrr_recursion(self, integrals):
        return self._closure(integrals, self.ket_vrr)

    def apply_recursion(self, integrals):
        result = self._staged_closure(
            integrals, [self.bra_vrr, self.ket_vrr, self.operator_vrr]
        )
        return self._nuclear.apply_recursion(result)

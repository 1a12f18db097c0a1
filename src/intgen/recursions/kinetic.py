r"""动能积分的 Obara–Saika 递推

.. math::

    (a+1_i|T|b) = P_iA\,(a|T|b)
        + \frac{N_i(a)}{2\zeta}(a-1_i|T|b) + \frac{N_i(b)}{2\zeta}(a|T|b-1_i)
        + 2\xi\Big[(a+1_i|b) - \frac{N_i(a)}{2a}(a-1_i|b)\Big]

ket 方向同理（:math:`P_iB`、:math:`1/(2b)`）。s 型终端化为重叠积分：

.. math::

    (s|T|s) = \xi\,(3 - 2\xi |AB|^2)\,(s|s)

剩余重叠积分交给 :class:`~intgen.recursions.overlap.T2COverlapDriver` 展开。

References
----------
.. [OS86] Obara, S. & Saika, A. (1986) J. Chem. Phys. 84, 3963
"""

from __future__ import annotations

from fractions import Fraction

from intgen.algebra.integral_set import SI2CIntegrals
from intgen.algebra.operator import KINETIC_ENERGY, OVERLAP, Operator, OperatorComponent
from intgen.algebra.recursion import RecursionDist, RecursionTerm
from intgen.recursions.base import IntegralDriver, TermDriver
from intgen.recursions.factors import F_XI, FI_A, FI_AB, FI_B, R2_AB, vector
from intgen.recursions.overlap import T2COverlapDriver, V2IOverlapDriver

__all__ = ["T2CKineticEnergyDriver", "V2IKineticEnergyDriver"]

_OVERLAP = OperatorComponent(OVERLAP)


class T2CKineticEnergyDriver(TermDriver):
    """动能积分项层驱动器。"""

    def __init__(self):
        super().__init__()
        self._overlap = T2COverlapDriver()

    def is_kinetic_energy(self, term: RecursionTerm) -> bool:
        return (
            term.integrand() == OperatorComponent(KINETIC_ENERGY)
            and not term.integral.prefixes
        )

    def _vrr(self, term: RecursionTerm, axis: str, center: int) -> RecursionDist | None:
        if not self.is_kinetic_energy(term):
            return None
        tval = term.shift(axis, -1, center)
        if tval is None:
            return None
        dist = RecursionDist(term)
        dist.add(tval.add(vector("PA" if center == 0 else "PB", axis)))
        for other in (0, 1):
            n = tval.integral[other][axis]
            lowered = tval.shift(axis, -1, other)
            if lowered is not None:
                dist.add(lowered.add(FI_AB, Fraction(n, 2)))
        dist.add(term.replace(_OVERLAP).add(F_XI, 2))
        n = tval.integral[center][axis]
        lowered = tval.shift(axis, -1, center)
        if lowered is not None:
            ovl = lowered.replace(_OVERLAP).add(F_XI, -n)
            dist.add(ovl.add(FI_A if center == 0 else FI_B))
        return dist

    def bra_vrr(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        return self._vrr(term, axis, 0)

    def ket_vrr(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        return self._vrr(term, axis, 1)

    def aux_vrr(self, term: RecursionTerm) -> RecursionDist | None:
        """:math:`(s|T|s)` 化为重叠积分 :math:`(s|s)`。"""
        if not self.is_kinetic_energy(term):
            return None
        if term.integral[0].order > 0 or term.integral[1].order > 0:
            return None
        ovl = term.replace(_OVERLAP)
        dist = RecursionDist(term)
        dist.add(ovl.add(F_XI, 3))
        dist.add(ovl.add(F_XI, -2, order=2).add(R2_AB))
        return dist

    def stages(self) -> list:
        return [
            ("kin_bra", self.bra_vrr),
            ("kin_ket", self.ket_vrr),
            ("kin_aux", self.aux_vrr, False),
        ] + self._overlap.stages()

    def apply_recursion(self, term: RecursionTerm) -> RecursionDist:
        """完全展开至 :math:`(s|1|s)`。"""
        return self._apply(term, self.stages())


class V2IKineticEnergyDriver(IntegralDriver):
    """动能积分描述符层闭包驱动器。"""

    set_type = SI2CIntegrals

    def __init__(self):
        self._overlap = V2IOverlapDriver()

    def is_kinetic_energy(self, integral) -> bool:
        return integral.integrand.name == KINETIC_ENERGY and integral.is_simple()

    def _vrr(self, integral, center: int) -> set:
        tval = integral.shift(-1, center)
        ovl = integral.replace(Operator(OVERLAP))
        return self._valid(
            tval,
            tval.shift(-1, 0),
            tval.shift(-1, 1),
            ovl,
            ovl.shift(-2, center),
        )

    def bra_vrr(self, integral) -> set:
        if not self.is_kinetic_energy(integral) or integral[0] == 0:
            return set()
        return self._vrr(integral, 0)

    def ket_vrr(self, integral) -> set:
        """bra 已降至 s 后的 ket 递推。"""
        if not self.is_kinetic_energy(integral) or integral[0] > 0 or integral[1] == 0:
            return set()
        return self._vrr(integral, 1)

    def aux_vrr(self, integral) -> set:
        if not self.is_kinetic_energy(integral) or integral.total_order() > 0:
            return set()
        return {integral.replace(Operator(OVERLAP))}

    def apply_recursion(self, integrals):
        result = self._staged_closure(integrals, [self.bra_vrr, self.ket_vrr, self.aux_vrr])
        return self._overlap.apply_recursion(result)

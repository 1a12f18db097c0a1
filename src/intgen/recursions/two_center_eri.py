r"""两中心电子排斥积分 :math:`(a|1/r_{12}|b)` 的垂直递推

:math:`G_a` 属于电子 1，:math:`G_b` 属于电子 2。把它看作四中心积分
:math:`(a\,s|b\,s)` 中两个 s 中心指数为零的极限，Head-Gordon–Pople 递推中
:math:`P = A`、:math:`Q = B`，:math:`W` 退化为两中心重叠的 :math:`P`，
约化指数 :math:`\rho = ab/(a+b) = \xi`：

.. math::

    (a+1_i|b)^{(m)} &= P_iA\,(a|b)^{(m+1)}
        + \frac{N_i(a)}{2a}\Big[(a-1_i|b)^{(m)} - \frac{\xi}{a}(a-1_i|b)^{(m+1)}\Big]
        + \frac{N_i(b)}{2(a+b)}(a|b-1_i)^{(m+1)} \\
    (a|b+1_i)^{(m)} &= P_iB\,(a|b)^{(m+1)}
        + \frac{N_i(b)}{2b}\Big[(a|b-1_i)^{(m)} - \frac{\xi}{b}(a|b-1_i)^{(m+1)}\Big]
        + \frac{N_i(a)}{2(a+b)}(a-1_i|b)^{(m+1)}

终端为 :math:`(s|s)^{(m)} = \frac{2\pi^{5/2}}{ab\sqrt{a+b}} F_m(\xi|AB|^2)`。
"""

from __future__ import annotations

from fractions import Fraction

from intgen.algebra.integral_set import SI2CIntegrals
from intgen.algebra.operator import ELECTRON_REPULSION, OperatorComponent
from intgen.algebra.recursion import RecursionDist, RecursionTerm
from intgen.recursions.base import IntegralDriver, TermDriver
from intgen.recursions.factors import F_XI, FI_A, FI_AB, FI_B, vector

__all__ = ["T2CElectronRepulsionDriver", "V2IElectronRepulsionDriver"]


class T2CElectronRepulsionDriver(TermDriver):
    """两中心电子排斥积分项层驱动器。"""

    def is_electron_repulsion(self, term: RecursionTerm) -> bool:
        return (
            term.integrand() == OperatorComponent(ELECTRON_REPULSION)
            and len(term.integral.centers) == 2
            and not term.integral.prefixes
        )

    def _vrr(self, term: RecursionTerm, axis: str, center: int) -> RecursionDist | None:
        if not self.is_electron_repulsion(term):
            return None
        tval = term.shift(axis, -1, center)
        if tval is None:
            return None
        finv = FI_A if center == 0 else FI_B
        dist = RecursionDist(term)
        dist.add(tval.shift_order(1).add(vector("PA" if center == 0 else "PB", axis)))
        n = tval.integral[center][axis]
        lowered = tval.shift(axis, -1, center)
        if lowered is not None:
            dist.add(lowered.add(finv, Fraction(n, 2)))
            dist.add(lowered.shift_order(1).add(finv, Fraction(-n, 2), order=2).add(F_XI))
        n = tval.integral[1 - center][axis]
        lowered = tval.shift(axis, -1, 1 - center)
        if lowered is not None:
            dist.add(lowered.shift_order(1).add(FI_AB, Fraction(n, 2)))
        return dist

    def bra_vrr(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        return self._vrr(term, axis, 0)

    def ket_vrr(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        return self._vrr(term, axis, 1)

    def stages(self) -> list:
        return [("eri2c_bra", self.bra_vrr), ("eri2c_ket", self.ket_vrr)]

    def apply_bra_vrr(self, term: RecursionTerm) -> RecursionDist:
        return self._apply(term, self.stages()[:1])

    def apply_ket_vrr(self, term: RecursionTerm) -> RecursionDist:
        return self._apply(term, self.stages()[1:])

    def apply_recursion(self, term: RecursionTerm) -> RecursionDist:
        """完全展开至 :math:`(s|s)^{(m)}`。"""
        return self._apply(term, self.stages())


class V2IElectronRepulsionDriver(IntegralDriver):
    """两中心电子排斥积分描述符层闭包驱动器。"""

    set_type = SI2CIntegrals

    def is_electron_repulsion(self, integral) -> bool:
        return (
            integral.integrand.name == ELECTRON_REPULSION
            and integral.n_centers == 2
            and integral.is_simple()
        )

    def _vrr(self, integral, center: int) -> set:
        tval = integral.shift(-1, center)
        result = {tval.shift_order(1)}
        lowered = tval.shift(-1, center)
        if lowered is not None:
            result.update((lowered, lowered.shift_order(1)))
        lowered = tval.shift(-1, 1 - center)
        if lowered is not None:
            result.add(lowered.shift_order(1))
        return result

    def bra_vrr(self, integral) -> set:
        if not self.is_electron_repulsion(integral) or integral[0] == 0:
            return set()
        return self._vrr(integral, 0)

    def ket_vrr(self, integral) -> set:
        """bra 已降至 s 后的 ket 递推。"""
        if not self.is_electron_repulsion(integral) or integral[0] > 0 or integral[1] == 0:
            return set()
        return self._vrr(integral, 1)

    def create_bra_vrr_recursion(self, integrals):
        return self._closure(integrals, self.bra_vrr)

    def create_ket_vrr_recursion(self, integrals):
        return self._closure(integrals, self.ket_vrr)

    def apply_recursion(self, integrals):
        return self._staged_closure(integrals, [self.bra_vrr, self.ket_vrr])

r"""电子排斥积分（四中心）的水平与垂直递推

水平递推（HRR）
===============

.. math::

    (ab| = (a-1_i, b+1_i| + (B_i - A_i)\,(a-1_i, b|

ket 方向同理（:math:`D_i - C_i`）。HRR 不改变辅助阶数。

垂直递推（VRR）
===============

以 B 中心为例（Head-Gordon–Pople 形式）：

.. math::

    (a\,b+1_i|cd)^{(m)} &= P_iB\,(ab|cd)^{(m)} + W_iP\,(ab|cd)^{(m+1)} \\
      &+ \frac{N_i(a)}{2\zeta}\Big[(a-1_i\,b|cd)^{(m)} - \frac{\rho}{\zeta}(a-1_i\,b|cd)^{(m+1)}\Big] \\
      &+ \frac{N_i(b)}{2\zeta}\Big[(a\,b-1_i|cd)^{(m)} - \frac{\rho}{\zeta}(a\,b-1_i|cd)^{(m+1)}\Big] \\
      &+ \frac{N_i(c)}{2(\zeta+\eta)}(ab|c-1_i\,d)^{(m+1)}
       + \frac{N_i(d)}{2(\zeta+\eta)}(ab|c\,d-1_i)^{(m+1)}

ket 方向交换 bra/ket 角色（:math:`Q_iD`、:math:`W_iQ`、:math:`1/(2\eta)`、:math:`\rho/\eta`）。

计算顺序：bra HRR（A→s）→ ket HRR（C→s）→ B 上 VRR → D 上 VRR，终端为 :math:`(ss|ss)^{(m)}`。

References
----------
.. [HGP88] Head-Gordon, M. & Pople, J. A. (1988)
   "A method for two-electron Gaussian integral and integral derivative evaluation
   using recurrence relations", J. Chem. Phys. 89, 5777
"""

from __future__ import annotations

from fractions import Fraction

from intgen.algebra.integral_set import SI4CIntegrals
from intgen.algebra.operator import ELECTRON_REPULSION, OperatorComponent
from intgen.algebra.recursion import RecursionDist, RecursionTerm
from intgen.recursions.base import IntegralDriver, TermDriver
from intgen.recursions.factors import FI_AB, FI_ABCD, FI_CD, FR_AB, FR_CD, vector

__all__ = ["T4CElectronRepulsionDriver", "V4IElectronRepulsionDriver"]

# (升高中心, 同侧另一中心, 对侧中心, P/Q 距离名, W 距离名, 1/指数和, rho/指数和)
_VRR_SETUP = {
    0: (0, 1, (2, 3), "PA", "WP", FI_AB, FR_AB),
    1: (1, 0, (2, 3), "PB", "WP", FI_AB, FR_AB),
    2: (2, 3, (0, 1), "QC", "WQ", FI_CD, FR_CD),
    3: (3, 2, (0, 1), "QD", "WQ", FI_CD, FR_CD),
}


class T4CElectronRepulsionDriver(TermDriver):
    """电子排斥积分项层驱动器。"""

    def is_electron_repulsion(self, term: RecursionTerm) -> bool:
        return (
            term.integrand() == OperatorComponent(ELECTRON_REPULSION)
            and len(term.integral.centers) == 4
            and not term.integral.prefixes
        )

    def _hrr(self, term: RecursionTerm, axis: str, center: int) -> RecursionDist | None:
        if not self.is_electron_repulsion(term):
            return None
        tval = term.shift(axis, -1, center)
        if tval is None:
            return None
        dist = RecursionDist(term)
        dist.add(tval.shift(axis, 1, center + 1))
        dist.add(tval.add(vector("BA" if center == 0 else "DC", axis)))
        return dist

    def bra_hrr(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        """A 降一阶、B 升一阶。"""
        return self._hrr(term, axis, 0)

    def ket_hrr(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        """C 降一阶、D 升一阶。"""
        return self._hrr(term, axis, 2)

    def _vrr(self, term: RecursionTerm, axis: str, center: int) -> RecursionDist | None:
        if not self.is_electron_repulsion(term):
            return None
        tval = term.shift(axis, -1, center)
        if tval is None:
            return None
        raised, partner, others, pname, wname, finv, frho = _VRR_SETUP[center]
        dist = RecursionDist(term)
        dist.add(tval.add(vector(pname, axis)))
        dist.add(tval.shift_order(1).add(vector(wname, axis)))
        for idx in (raised, partner):
            n = tval.integral[idx][axis]
            lowered = tval.shift(axis, -1, idx)
            if lowered is not None:
                dist.add(lowered.add(finv, Fraction(n, 2)))
                dist.add(lowered.shift_order(1).add(finv, Fraction(-n, 2)).add(frho))
        for idx in others:
            n = tval.integral[idx][axis]
            lowered = tval.shift(axis, -1, idx)
            if lowered is not None:
                dist.add(lowered.shift_order(1).add(FI_ABCD, Fraction(n, 2)))
        return dist

    def bra_vrr_a(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        return self._vrr(term, axis, 0)

    def bra_vrr(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        """B 中心上的 VRR。"""
        return self._vrr(term, axis, 1)

    def ket_vrr_c(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        return self._vrr(term, axis, 2)

    def ket_vrr(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        """D 中心上的 VRR。"""
        return self._vrr(term, axis, 3)

    def stages(self) -> list:
        return [
            ("eri_bra_hrr", self.bra_hrr),
            ("eri_ket_hrr", self.ket_hrr),
            ("eri_bra_vrr", self.bra_vrr),
            ("eri_ket_vrr", self.ket_vrr),
        ]

    def apply_bra_hrr(self, term: RecursionTerm) -> RecursionDist:
        return self._apply(term, self.stages()[0:1])

    def apply_ket_hrr(self, term: RecursionTerm) -> RecursionDist:
        return self._apply(term, self.stages()[1:2])

    def apply_bra_vrr(self, term: RecursionTerm) -> RecursionDist:
        return self._apply(term, self.stages()[2:3])

    def apply_ket_vrr(self, term: RecursionTerm) -> RecursionDist:
        return self._apply(term, self.stages()[3:4])

    def apply_vrr(self, term: RecursionTerm) -> RecursionDist:
        return self._apply(term, self.stages()[2:])

    def apply_recursion(self, term: RecursionTerm) -> RecursionDist:
        """完全展开至 :math:`(ss|ss)^{(m)}`。"""
        return self._apply(term, self.stages())


class V4IElectronRepulsionDriver(IntegralDriver):
    """电子排斥积分描述符层闭包驱动器。"""

    set_type = SI4CIntegrals

    def is_electron_repulsion(self, integral) -> bool:
        return (
            integral.integrand.name == ELECTRON_REPULSION
            and integral.n_centers == 4
            and integral.is_simple()
        )

    def _hrr(self, integral, center: int) -> set:
        if not self.is_electron_repulsion(integral) or integral[center] == 0:
            return set()
        tval = integral.shift(-1, center)
        return self._valid(tval.shift(1, center + 1), tval)

    def bra_hrr(self, integral) -> set:
        return self._hrr(integral, 0)

    def ket_hrr(self, integral) -> set:
        """A 已为 s 时的 ket HRR。"""
        if integral[0] > 0:
            return set()
        return self._hrr(integral, 2)

    def _vrr(self, integral, center: int) -> set:
        tval = integral.shift(-1, center)
        raised, partner, others, *_ = _VRR_SETUP[center]
        result = {tval, tval.shift_order(1)}
        for idx in (raised, partner):
            lowered = tval.shift(-1, idx)
            if lowered is not None:
                result.update((lowered, lowered.shift_order(1)))
        for idx in others:
            lowered = tval.shift(-1, idx)
            if lowered is not None:
                result.add(lowered.shift_order(1))
        return result

    def bra_vrr(self, integral) -> set:
        """A 与 C 已为 s 时 B 上的 VRR。"""
        if not self.is_electron_repulsion(integral) or integral[1] == 0:
            return set()
        if integral[0] > 0 or integral[2] > 0:
            return set()
        return self._vrr(integral, 1)

    def ket_vrr(self, integral) -> set:
        """A、B、C 均为 s 时 D 上的 VRR。"""
        if not self.is_electron_repulsion(integral) or integral[3] == 0:
            return set()
        if integral[0] > 0 or integral[1] > 0 or integral[2] > 0:
            return set()
        return self._vrr(integral, 3)

    def full_vrr(self, integral) -> set:
        """不预先做 HRR 时的 VRR：总在编号最大的非 s 中心上降阶。"""
        if not self.is_electron_repulsion(integral):
            return set()
        for center in (3, 2, 1, 0):
            if integral[center] > 0:
                return self._vrr(integral, center)
        return set()

    def create_bra_hrr_recursion(self, integrals):
        return self._closure(integrals, self.bra_hrr)

    def create_ket_hrr_recursion(self, integrals):
        return self._closure(integrals, self.ket_hrr)

    def create_vrr_recursion(self, integrals):
        return self._staged_closure(integrals, [self.bra_vrr, self.ket_vrr])

    def create_full_vrr_recursion(self, integrals):
        return self._closure(integrals, self.full_vrr)

    def apply_recursion(self, integrals):
        """bra HRR → ket HRR → VRR 的完整闭包。"""
        result = self.create_bra_hrr_recursion(integrals)
        result = self.create_ket_hrr_recursion(result)
        return self.create_vrr_recursion(result)

r"""线性动量积分递推

动量算符 :math:`\hat p_i = -i\partial_i` 作用在 ket 上。本模块记录实值部分

.. math::

    (a|p_i|b) = -\int G_a\,\partial_i G_b\,d\mathbf r,\qquad
    (a|\hat p_i|b) = i\,(a|p_i|b)

对 ket 高斯函数求导得到一步算符递推：

.. math::

    (a|p_i|b) = 2b\,(a|b+1_i) - N_i(b)\,(a|b-1_i)

右侧均为重叠积分，交给 :class:`~intgen.recursions.overlap.T2COverlapDriver` 展开。
算符只有一个分量方向，这一步不做坐标轴选择。
"""

from __future__ import annotations

from intgen.algebra.integral_set import SI2CIntegrals
from intgen.algebra.operator import LINEAR_MOMENTUM, OVERLAP, Operator, OperatorComponent
from intgen.algebra.recursion import RecursionDist, RecursionTerm
from intgen.recursions.base import IntegralDriver, TermDriver
from intgen.recursions.factors import EXPONENTS
from intgen.recursions.overlap import T2COverlapDriver, V2IOverlapDriver

__all__ = ["T2CLinearMomentumDriver", "V2ILinearMomentumDriver"]


class T2CLinearMomentumDriver(TermDriver):
    """线性动量积分项层驱动器。"""

    def __init__(self):
        super().__init__()
        self._overlap = T2COverlapDriver()

    def is_linear_momentum(self, term: RecursionTerm) -> bool:
        return (
            term.integrand().name == LINEAR_MOMENTUM
            and term.integrand().order == 1
            and not term.integral.prefixes
        )

    def op_vrr(self, term: RecursionTerm) -> RecursionDist | None:
        """消去动量算符，得到 ket 升降一阶的重叠积分。"""
        if not self.is_linear_momentum(term):
            return None
        axis = term.integrand().shape.primary()
        tval = term.replace(OperatorComponent(OVERLAP))
        dist = RecursionDist(term)
        dist.add(tval.shift(axis, 1, 1).add(EXPONENTS[1], 2))
        lowered = tval.shift(axis, -1, 1)
        if lowered is not None:
            dist.add(lowered.scale(-tval.integral[1][axis]))
        return dist

    def stages(self) -> list:
        return [("lmom_op", self.op_vrr, False)] + self._overlap.stages()

    def apply_op_vrr(self, term: RecursionTerm) -> RecursionDist:
        return self._apply(term, self.stages()[:1])

    def apply_recursion(self, term: RecursionTerm) -> RecursionDist:
        """完全展开至 :math:`(s|1|s)`。"""
        return self._apply(term, self.stages())


class V2ILinearMomentumDriver(IntegralDriver):
    """线性动量积分描述符层闭包驱动器。"""

    set_type = SI2CIntegrals

    def __init__(self):
        self._overlap = V2IOverlapDriver()

    def is_linear_momentum(self, integral) -> bool:
        return (
            integral.integrand.name == LINEAR_MOMENTUM
            and integral.integrand.order == 1
            and integral.is_simple()
        )

    def op_vrr(self, integral) -> set:
        if not self.is_linear_momentum(integral):
            return set()
        ovl = integral.replace(Operator(OVERLAP))
        return self._valid(ovl.shift(1, 1), ovl.shift(-1, 1))

    def create_op_vrr_recursion(self, integrals):
        return self._closure(integrals, self.op_vrr)

    def apply_recursion(self, integrals):
        return self._overlap.apply_recursion(self.create_op_vrr_recursion(integrals))

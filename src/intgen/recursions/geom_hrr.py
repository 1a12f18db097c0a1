r"""带几何导数前缀的电子排斥积分 HRR

HRR 是中心坐标的恒等式，对其求导按 Leibniz 法则多出一项：

.. math::

    \partial^{t}(ab| = \partial^{t}(a-1_i\,b+1_i| + (B_i-A_i)\,\partial^{t}(a-1_i\,b|
        \mp t_i\,\partial^{t-1_i}(a-1_i\,b|

导数作用在 A 上取负号，作用在 B 上取正号；ket 方向同理（:math:`D_i - C_i`）。

每个驱动器只接受一种前缀组合（及其逐阶降低后可达的组合），例如
``Geom10`` 接受 ``(1,0,0,0)``、``(0,0,1,0)``、``(1,0,1,0)``。
单步展开在 x、y、z 中选择项数最少的方向。HRR 完成后（A、C 降为 s）剩余前缀交给
:mod:`intgen.recursions.center` 处理。
"""

from __future__ import annotations

import itertools

from intgen.algebra.integral_set import SI4CIntegrals
from intgen.algebra.operator import ELECTRON_REPULSION
from intgen.algebra.recursion import RecursionDist, RecursionTerm
from intgen.recursions.base import IntegralDriver, TermDriver
from intgen.recursions.factors import vector

__all__ = [
    "T4CGeomHrrElectronRepulsionDriver",
    "T4CGeom10HrrElectronRepulsionDriver",
    "T4CGeom01HrrElectronRepulsionDriver",
    "T4CGeom11HrrElectronRepulsionDriver",
    "T4CGeom20HrrElectronRepulsionDriver",
    "V4IGeomHrrElectronRepulsionDriver",
    "V4IGeom10HrrElectronRepulsionDriver",
    "V4IGeom01HrrElectronRepulsionDriver",
    "V4IGeom11HrrElectronRepulsionDriver",
    "V4IGeom20HrrElectronRepulsionDriver",
    "GEOM_PATTERNS",
]

GEOM_PATTERNS = {
    "10": ((1, 0, 0, 0), (0, 0, 1, 0), (1, 0, 1, 0)),
    "01": ((0, 1, 0, 0), (0, 0, 0, 1), (0, 1, 0, 1)),
    "11": ((1, 1, 0, 0),),
    "20": ((2, 0, 0, 0),),
}


def _reachable(patterns) -> frozenset:
    """逐分量不超过某个模式的全部前缀阶数组合（含全零）。"""
    orders = set()
    for pattern in patterns:
        orders.update(itertools.product(*(range(k + 1) for k in pattern)))
    return frozenset(orders)


class T4CGeomHrrElectronRepulsionDriver(TermDriver):
    """带前缀电子排斥积分 HRR 的项层驱动器基类。"""

    patterns: tuple = ()

    def __init__(self):
        super().__init__()
        self._accepted = _reachable(self.patterns)

    def is_electron_repulsion(self, term: RecursionTerm) -> bool:
        if term.integrand().name != ELECTRON_REPULSION or term.integrand().order > 0:
            return False
        if len(term.integral.centers) != 4:
            return False
        return term.prefixes_order() in self._accepted

    def _hrr(self, term: RecursionTerm, axis: str, center: int) -> RecursionDist | None:
        if not self.is_electron_repulsion(term):
            return None
        tval = term.shift(axis, -1, center)
        if tval is None:
            return None
        dist = RecursionDist(term)
        dist.add(tval.shift(axis, 1, center + 1))
        dist.add(tval.add(vector("BA" if center == 0 else "DC", axis)))
        if tval.integral.prefixes:
            for idx, sign in ((center, -1), (center + 1, 1)):
                t = tval.integral.prefixes[idx].shape[axis]
                if t > 0:
                    dist.add(tval.shift_prefix(axis, -1, idx).scale(sign * t))
        return dist

    def bra_hrr(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        return self._hrr(term, axis, 0)

    def ket_hrr(self, term: RecursionTerm, axis: str) -> RecursionDist | None:
        return self._hrr(term, axis, 2)

    def stages(self) -> list:
        name = type(self).__name__
        return [(f"{name}_bra", self.bra_hrr), (f"{name}_ket", self.ket_hrr)]

    def apply_bra_hrr(self, term: RecursionTerm) -> RecursionDist:
        return self._apply(term, self.stages()[:1])

    def apply_ket_hrr(self, term: RecursionTerm) -> RecursionDist:
        return self._apply(term, self.stages()[1:])

    def apply_bra_ket_hrr(self, term: RecursionTerm) -> RecursionDist:
        """A 与 C 均降至 s。"""
        return self._apply(term, self.stages())


class T4CGeom10HrrElectronRepulsionDriver(T4CGeomHrrElectronRepulsionDriver):
    patterns = GEOM_PATTERNS["10"]


class T4CGeom01HrrElectronRepulsionDriver(T4CGeomHrrElectronRepulsionDriver):
    patterns = GEOM_PATTERNS["01"]


class T4CGeom11HrrElectronRepulsionDriver(T4CGeomHrrElectronRepulsionDriver):
    patterns = GEOM_PATTERNS["11"]


class T4CGeom20HrrElectronRepulsionDriver(T4CGeomHrrElectronRepulsionDriver):
    patterns = GEOM_PATTERNS["20"]


class V4IGeomHrrElectronRepulsionDriver(IntegralDriver):
    """带前缀电子排斥积分 HRR 的描述符层驱动器基类。"""

    set_type = SI4CIntegrals
    patterns: tuple = ()

    def __init__(self):
        self._accepted = _reachable(self.patterns)

    def is_electron_repulsion(self, integral) -> bool:
        if integral.integrand.name != ELECTRON_REPULSION or integral.n_centers != 4:
            return False
        return integral.prefixes_order() in self._accepted

    def _hrr(self, integral, center: int) -> set:
        if not self.is_electron_repulsion(integral) or integral[center] == 0:
            return set()
        tval = integral.shift(-1, center)
        result = self._valid(tval.shift(1, center + 1), tval)
        for idx in (center, center + 1):
            if tval.prefixes_order()[idx] > 0:
                result.add(tval.shift_prefix(-1, idx))
        return result

    def bra_hrr(self, integral) -> set:
        return self._hrr(integral, 0)

    def ket_hrr(self, integral) -> set:
        """A 已为 s 时的 ket HRR。"""
        if integral[0] > 0:
            return set()
        return self._hrr(integral, 2)

    def create_bra_hrr_recursion(self, integrals):
        return self._closure(integrals, self.bra_hrr)

    def create_ket_hrr_recursion(self, integrals):
        return self._closure(integrals, self.ket_hrr)

    def apply_recursion(self, integrals):
        return self._staged_closure(integrals, [self.bra_hrr, self.ket_hrr])


class V4IGeom10HrrElectronRepulsionDriver(V4IGeomHrrElectronRepulsionDriver):
    patterns = GEOM_PATTERNS["10"]


class V4IGeom01HrrElectronRepulsionDriver(V4IGeomHrrElectronRepulsionDriver):
    patterns = GEOM_PATTERNS["01"]


class V4IGeom11HrrElectronRepulsionDriver(V4IGeomHrrElectronRepulsionDriver):
    patterns = GEOM_PATTERNS["11"]


class V4IGeom20HrrElectronRepulsionDriver(V4IGeomHrrElectronRepulsionDriver):
    patterns = GEOM_PATTERNS["20"]

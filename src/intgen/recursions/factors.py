r"""递推关系中使用的符号因子

记号：高斯指数 :math:`a, b, c, d`，

.. math::

    \zeta = a + b,\quad \eta = c + d,\quad \rho = \frac{\zeta\eta}{\zeta+\eta},\quad
    \xi = \frac{ab}{a+b}

    P = \frac{aA + bB}{\zeta},\quad Q = \frac{cC + dD}{\eta},\quad
    W = \frac{\zeta P + \eta Q}{\zeta + \eta}

两中心电子排斥积分中约化指数 :math:`\rho = ab/(a+b)` 与 :math:`\xi` 相同。

向量因子（如 ``rpa_x`` :math:`= P_x - A_x`）按坐标轴给出分量；
标量因子的数值替换标签即其 ``tag``。
"""

from __future__ import annotations

from intgen.algebra.factor import Factor
from intgen.algebra.tensor import TensorComponent

__all__ = [
    "FI_AB",
    "FI_CD",
    "FR_AB",
    "FR_CD",
    "FI_ABCD",
    "F_XI",
    "ZETA",
    "FI_A",
    "FI_B",
    "R2_AB",
    "EXPONENTS",
    "vector",
]

FI_AB = Factor("1/zeta", "fi_ab")
FI_CD = Factor("1/eta", "fi_cd")
FR_AB = Factor("rho/zeta", "fr_ab")
FR_CD = Factor("rho/eta", "fr_cd")
FI_ABCD = Factor("1/(zeta+eta)", "fi_abcd")
F_XI = Factor("xi", "fxi")
ZETA = Factor("zeta", "fz")
FI_A = Factor("1/a_exp", "fi_a")
FI_B = Factor("1/b_exp", "fi_b")
R2_AB = Factor("|AB|^2", "r2_ab")

# 按中心索引排列的高斯指数
EXPONENTS = (
    Factor("a_exp", "a_exp"),
    Factor("b_exp", "b_exp"),
    Factor("c_exp", "c_exp"),
    Factor("d_exp", "d_exp"),
)

_VECTORS = {
    "PA": "rpa",
    "PB": "rpb",
    "PC": "rpc",
    "QC": "rqc",
    "QD": "rqd",
    "WP": "rwp",
    "WQ": "rwq",
    "BA": "rba",
    "DC": "rdc",
}


def vector(name: str, axis: str) -> Factor:
    """距离向量因子的一个分量，如 ``vector("PA", "x")`` → ``rpa_x``。"""
    if name not in _VECTORS:
        raise ValueError(f"未知距离因子: {name!r}")
    return Factor(name, _VECTORS[name], TensorComponent.unit(axis))

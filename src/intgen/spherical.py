r"""笛卡尔 → 实球谐分量变换系数表

静态查找数据（:math:`\ell = 0 \ldots 4`），模块导入时构造一次、之后只读。
球谐分量按 :math:`m = -\ell, \ldots, \ell` 排列；笛卡尔分量索引与
:meth:`intgen.algebra.tensor.Tensor.components` 的顺序一致。

系数以生成代码中使用的文本形式给出（如 ``"0.5 * f2_3"``），其中的常数
（``f2_3`` 等）定义见 :meth:`SphericalMomentum.get_factors`，可用 :meth:`SphericalMomentum.evaluate`
求出数值。
"""

from __future__ import annotations

from dataclasses import dataclass

import sympy as sp

__all__ = ["SphericalMomentum", "SPHERICAL_CONSTANTS"]

# 每个球谐分量的 (系数, 笛卡尔分量索引) 列表
_TABLE = {
    0: (
        (("1.0", 0),),
    ),
    1: (
        (("1.0", 1),),
        (("1.0", 2),),
        (("1.0", 0),),
    ),
    2: (
        (("f2_3", 1),),
        (("f2_3", 4),),
        (("-1.0", 0), ("-1.0", 3), ("2.0", 5)),
        (("f2_3", 2),),
        (("0.5 * f2_3", 0), ("-0.5 * f2_3", 3)),
    ),
    3: (
        (("3.0 * f3_5", 1), ("-f3_5", 6)),
        (("f3_15", 4),),
        (("4.0 * f3_3", 8), ("-f3_3", 1), ("-f3_3", 6)),
        (("2.0", 9), ("-3.0", 2), ("-3.0", 7)),
        (("4.0 * f3_3", 5), ("-f3_3", 0), ("-f3_3", 3)),
        (("0.5 * f3_15", 2), ("-0.5 * f3_15", 7)),
        (("f3_5", 0), ("-3.0 * f3_5", 3)),
    ),
    4: (
        (("f4_35", 1), ("-f4_35", 6)),
        (("3.0 * f4_17", 4), ("-f4_17", 11)),
        (("6.0 * f4_5", 8), ("-f4_5", 1), ("-f4_5", 6)),
        (("4.0 * f4_2", 13), ("-3.0 * f4_2", 4), ("-3.0 * f4_2", 11)),
        (("8.0", 14), ("3.0", 0), ("3.0", 10), ("6.0", 3), ("-24.0", 5), ("-24.0", 12)),
        (("4.0 * f4_2", 9), ("-3.0 * f4_2", 2), ("-3.0 * f4_2", 7)),
        (("3.0 * f4_5", 5), ("-3.0 * f4_5", 12), ("-0.5 * f4_5", 0), ("0.5 * f4_5", 10)),
        (("f4_17", 2), ("-3.0 * f4_17", 7)),
        (("0.25 * f4_35", 0), ("0.25 * f4_35", 10), ("-1.50 * f4_35", 3)),
    ),
}

SPHERICAL_CONSTANTS = {
    "f2_3": 2 * sp.sqrt(3),
    "f3_5": sp.sqrt(sp.Rational(5, 2)),
    "f3_15": 2 * sp.sqrt(15),
    "f3_3": sp.sqrt(sp.Rational(3, 2)),
    "f4_35": 4 * sp.sqrt(35),
    "f4_17": 4 * sp.sqrt(sp.Rational(35, 2)),
    "f4_5": 4 * sp.sqrt(5),
    "f4_2": 4 * sp.sqrt(sp.Rational(5, 2)),
}

_DEFINITIONS = {
    2: ("f2_3 = 2.0 * std::sqrt(3.0)",),
    3: (
        "f3_5 = std::sqrt(2.5)",
        "f3_15 = 2.0 * std::sqrt(15.0)",
        "f3_3 = std::sqrt(1.5)",
    ),
    4: (
        "f4_35 = 4.0 * std::sqrt(35)",
        "f4_17 = 4.0 * std::sqrt(17.5)",
        "f4_5 = 4.0 * std::sqrt(5.0)",
        "f4_2 = 4.0 * std::sqrt(2.5)",
    ),
}


@dataclass(frozen=True)
class SphericalMomentum:
    """角动量 ``angmom`` 的球谐变换表。"""

    angmom: int

    def __post_init__(self):
        if self.angmom not in _TABLE:
            raise ValueError(f"球谐变换表仅支持角动量 0-4，当前值: {self.angmom}")

    def __len__(self) -> int:
        return 2 * self.angmom + 1

    def select_pairs(self, cartcomp: int) -> list[tuple[int, str]]:
        """包含笛卡尔分量 ``cartcomp`` 的 ``(球谐分量索引, 系数)`` 对。"""
        return [
            (index, factor)
            for index, entries in enumerate(_TABLE[self.angmom])
            for factor, comp in entries
            if comp == cartcomp
        ]

    def get_factors(self) -> list[str]:
        """系数中用到的常数定义（生成代码文本）。"""
        return list(_DEFINITIONS.get(self.angmom, ()))

    @staticmethod
    def evaluate(factor: str) -> float:
        """系数文本的数值。"""
        return float(sp.sympify(factor, locals=SPHERICAL_CONSTANTS))

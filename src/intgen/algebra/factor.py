"""符号因子

递推关系中的乘数（中心间距离分量、指数组合等）用 :class:`Factor` 表示。
因子在递推项中的出现次数由 :class:`~intgen.algebra.recursion.RecursionTerm` 记录。
"""

from __future__ import annotations

from dataclasses import dataclass, field

import sympy as sp

from intgen.algebra.tensor import TensorComponent

__all__ = ["Factor"]


@dataclass(frozen=True, order=True)
class Factor:
    """命名符号因子。

    Attributes
    ----------
    name : str
        物理含义（如 ``"PA"``、``"1/zeta"``）。
    tag : str
        生成代码中使用的变量前缀（如 ``"rpa"``、``"fz"``）。
    shape : TensorComponent
        向量型因子的分量（标量因子为零阶）。
    """

    name: str
    tag: str
    shape: TensorComponent = field(default_factory=TensorComponent)

    def label(self) -> str:
        """数值替换标签，如 ``"rpa_x"``；标量因子直接返回 ``tag``。"""
        if self.shape.order > 0:
            return f"{self.tag}_{self.shape.label()}"
        return self.tag

    def symbol(self) -> sp.Symbol:
        return sp.Symbol(self.label())

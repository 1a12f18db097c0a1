"""积分算符（被积函数）描述

:class:`Operator` 描述整个算符（名称 + 张量形状），
:class:`OperatorComponent` 描述其某个笛卡尔分量。相等与排序均只依赖名称与形状。

常用名称见 :data:`OVERLAP` 等常量；几何导数前缀使用 :data:`GEOM_PREFIX`。
"""

from __future__ import annotations

from dataclasses import dataclass, field

from intgen.algebra.tensor import Tensor, TensorComponent

__all__ = [
    "OVERLAP",
    "KINETIC_ENERGY",
    "NUCLEAR_POTENTIAL",
    "MULTIPOLE",
    "LINEAR_MOMENTUM",
    "ELECTRIC_FIELD",
    "ELECTRON_REPULSION",
    "GEOM_PREFIX",
    "Operator",
    "OperatorComponent",
]

OVERLAP = "1"
KINETIC_ENERGY = "T"
NUCLEAR_POTENTIAL = "A"
MULTIPOLE = "r"
LINEAR_MOMENTUM = "p"
ELECTRIC_FIELD = "A1"
ELECTRON_REPULSION = "1/|r-r'|"
GEOM_PREFIX = "d/dR"


@dataclass(frozen=True, order=True)
class Operator:
    """算符描述符：名称 + 张量形状（标量算符形状为 0 阶）。"""

    name: str = OVERLAP
    shape: Tensor = field(default_factory=Tensor)

    @property
    def order(self) -> int:
        return self.shape.order

    def shift(self, value: int) -> Operator | None:
        shape = self.shape.shift(value)
        if shape is None:
            return None
        return Operator(self.name, shape)

    def components(self) -> list[OperatorComponent]:
        return [OperatorComponent(self.name, comp) for comp in self.shape.components()]

    def label(self) -> str:
        if self.shape.order == 0:
            return self.name
        return f"{self.name}[{self.shape.label()}]"


@dataclass(frozen=True, order=True)
class OperatorComponent:
    """算符的一个笛卡尔分量。"""

    name: str = OVERLAP
    shape: TensorComponent = field(default_factory=TensorComponent)

    @property
    def order(self) -> int:
        return self.shape.order

    def shift(self, axis: str, value: int) -> OperatorComponent | None:
        shape = self.shape.shift(axis, value)
        if shape is None:
            return None
        return OperatorComponent(self.name, shape)

    def operator(self) -> Operator:
        return Operator(self.name, Tensor(self.shape.order))

    def label(self) -> str:
        if self.shape.order == 0:
            return self.name
        return f"{self.name}[{self.shape.label()}]"

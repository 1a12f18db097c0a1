r"""笛卡尔角动量张量

本模块提供单个中心上的角动量描述：

- :class:`TensorComponent`：一个笛卡尔分量 :math:`x^{a_x} y^{a_y} z^{a_z}`
- :class:`Tensor`：阶数为 :math:`\ell` 的整个壳层（描述符层）

两者均为不可变值类型；所有平移操作返回新对象，平移非法（幂次为负）时返回 ``None``。

分量排列顺序
============

壳层分量按 "x 优先递减" 的规范顺序枚举，例如 d 壳层：

.. math::

    xx,\; xy,\; xz,\; yy,\; yz,\; zz

分量数目为 :math:`\binom{\ell+2}{2} = (\ell+1)(\ell+2)/2`。
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "AXES",
    "ANGMOM_LABELS",
    "axis_index",
    "TensorComponent",
    "Tensor",
]

AXES = "xyz"

# 角动量字母（J 与 P/S 重复的字母按惯例跳过）
ANGMOM_LABELS = "SPDFGHIKLMNOQRTUV"


def axis_index(axis: str) -> int:
    """返回坐标轴字母对应的索引（x→0, y→1, z→2）。"""
    if axis not in AXES or len(axis) != 1:
        raise ValueError(f"未知坐标轴: {axis!r}")
    return AXES.index(axis)


@dataclass(frozen=True, order=True)
class TensorComponent:
    """笛卡尔张量分量 :math:`(a_x, a_y, a_z)`。

    Attributes
    ----------
    x, y, z : int
        三个方向上的幂次（非负）。
    """

    x: int = 0
    y: int = 0
    z: int = 0

    def __post_init__(self):
        if self.x < 0 or self.y < 0 or self.z < 0:
            raise ValueError(f"张量分量幂次必须非负: ({self.x}, {self.y}, {self.z})")

    @classmethod
    def unit(cls, axis: str) -> "TensorComponent":
        """沿给定轴的单位分量（如 ``unit("y") == (0, 1, 0)``）。"""
        powers = [0, 0, 0]
        powers[axis_index(axis)] = 1
        return cls(*powers)

    @property
    def order(self) -> int:
        return self.x + self.y + self.z

    def __getitem__(self, axis: str) -> int:
        return (self.x, self.y, self.z)[axis_index(axis)]

    def to_tuple(self) -> tuple[int, int, int]:
        return (self.x, self.y, self.z)

    def shift(self, axis: str, value: int) -> TensorComponent | None:
        """沿 ``axis`` 平移 ``value``；若结果幂次为负返回 ``None``。"""
        powers = list(self.to_tuple())
        powers[axis_index(axis)] += value
        if powers[axis_index(axis)] < 0:
            return None
        return TensorComponent(*powers)

    def primary(self) -> str:
        """第一个非零幂次所在的轴；零阶分量返回 ``"x"``。"""
        for axis, power in zip(AXES, self.to_tuple()):
            if power > 0:
                return axis
        return "x"

    def label(self) -> str:
        if self.order == 0:
            return "0"
        return "x" * self.x + "y" * self.y + "z" * self.z


@dataclass(frozen=True, order=True)
class Tensor:
    """阶数为 ``order`` 的角动量张量（整个壳层）。"""

    order: int = 0

    def __post_init__(self):
        if self.order < 0:
            raise ValueError(f"张量阶数必须非负，当前值: {self.order}")
        if self.order >= len(ANGMOM_LABELS):
            raise ValueError(f"张量阶数超出支持范围 (<{len(ANGMOM_LABELS)}): {self.order}")

    def shift(self, value: int) -> Tensor | None:
        order = self.order + value
        if order < 0 or order >= len(ANGMOM_LABELS):
            return None
        return Tensor(order)

    def label(self) -> str:
        return ANGMOM_LABELS[self.order]

    def components(self) -> list[TensorComponent]:
        r"""按规范顺序枚举全部笛卡尔分量。

        从零阶分量出发，逐阶沿 x、y、z 平移，只保留 ``primary()`` 等于平移轴的结果，
        保证每个分量恰好生成一次，顺序与 :math:`(\ell+1)(\ell+2)/2` 个标准分量一致。
        """
        comps = [TensorComponent()]
        for _ in range(self.order):
            nxt = []
            for axis in AXES:
                for comp in comps:
                    shifted = comp.shift(axis, 1)
                    if shifted.primary() == axis:
                        nxt.append(shifted)
            comps = nxt
        return comps

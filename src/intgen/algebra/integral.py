r"""积分描述符与积分分量

两层表示
========

- **描述符**（:class:`I2CIntegral`、:class:`I4CIntegral`）：每个中心只记录角动量阶数
  :math:`\ell`，用于闭包（需要哪些子积分）层面的簿记；
- **分量**（:class:`T2CIntegral`、:class:`T4CIntegral`）：每个中心取一个具体的笛卡尔分量，
  用于逐项代数展开。

两者都携带：中心张量、被积算符、辅助（Boys 函数）阶数 :math:`m`，以及几何导数前缀。
前缀元组长度等于中心数，或为空（等价于全零，即未求导）。

所有对象不可变、可哈希，并具有严格全序，可直接作为有序集合的键。
平移操作（角动量 ±1、前缀阶数 ±1、辅助阶数 ±1）总是返回新对象；
结果非法（出现负阶数）时返回 ``None``，这是递推的正常终止信号而非错误。
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field, replace as dc_replace
from typing import ClassVar

from intgen.algebra.operator import GEOM_PREFIX, Operator, OperatorComponent
from intgen.algebra.tensor import Tensor, TensorComponent

__all__ = [
    "Integral",
    "I2CIntegral",
    "I4CIntegral",
    "IntegralComponent",
    "T2CIntegral",
    "T4CIntegral",
]


def _check_centers(obj, n_centers: int) -> None:
    if len(obj.centers) != n_centers:
        raise ValueError(
            f"{type(obj).__name__} 需要 {n_centers} 个中心，实际: {len(obj.centers)}"
        )
    if obj.order < 0:
        raise ValueError(f"辅助阶数必须非负，当前值: {obj.order}")
    if obj.prefixes and len(obj.prefixes) != n_centers:
        raise ValueError(
            f"前缀数目必须等于中心数 {n_centers} 或为空，实际: {len(obj.prefixes)}"
        )


@dataclass(frozen=True, order=True)
class Integral:
    """积分描述符基类（请使用 :class:`I2CIntegral` 或 :class:`I4CIntegral`）。

    Attributes
    ----------
    centers : tuple[Tensor, ...]
        各中心角动量（两中心为 bra, ket；四中心为 A, B, C, D）。
    integrand : Operator
        被积算符。
    order : int
        辅助（Boys 函数）阶数 :math:`m`。
    prefixes : tuple[Operator, ...]
        各中心几何导数前缀；空元组表示全零。
    """

    centers: tuple[Tensor, ...]
    integrand: Operator = field(default_factory=Operator)
    order: int = 0
    prefixes: tuple[Operator, ...] = ()

    n_centers: ClassVar[int] = 0
    component_type: ClassVar[type] = None

    def __post_init__(self):
        object.__setattr__(self, "centers", tuple(self.centers))
        object.__setattr__(self, "prefixes", tuple(self.prefixes))
        _check_centers(self, self.n_centers)

    @classmethod
    def from_orders(
        cls,
        angmoms,
        name: str,
        order: int = 0,
        geom_orders=(),
        operator_order: int = 0,
    ):
        """由角动量阶数列表直接构造描述符。

        Parameters
        ----------
        angmoms : sequence of int
            各中心角动量阶数。
        name : str
            被积算符名称。
        order : int, optional
            辅助阶数，默认 0。
        geom_orders : sequence of int, optional
            各中心几何导数阶数；全零或空表示无前缀。
        operator_order : int, optional
            算符自身张量阶数（如多极矩阶数），默认 0。
        """
        prefixes = ()
        if any(geom_orders):
            if len(geom_orders) != cls.n_centers:
                raise ValueError(
                    f"几何导数阶数数目必须为 {cls.n_centers}，实际: {len(geom_orders)}"
                )
            prefixes = tuple(Operator(GEOM_PREFIX, Tensor(k)) for k in geom_orders)
        return cls(
            centers=tuple(Tensor(l) for l in angmoms),
            integrand=Operator(name, Tensor(operator_order)),
            order=order,
            prefixes=prefixes,
        )

    def __getitem__(self, center: int) -> int:
        return self.centers[center].order

    def angmoms(self) -> tuple[int, ...]:
        return tuple(t.order for t in self.centers)

    def total_order(self) -> int:
        return sum(self.angmoms())

    def _prefix_tuple(self) -> tuple[Operator, ...]:
        if self.prefixes:
            return self.prefixes
        return tuple(Operator(GEOM_PREFIX, Tensor(0)) for _ in range(self.n_centers))

    def prefixes_order(self) -> tuple[int, ...]:
        """各中心前缀阶数；空前缀视为全零。"""
        return tuple(p.order for p in self._prefix_tuple())

    def is_simple(self) -> bool:
        return not self.prefixes

    def shift(self, value: int, center: int):
        """中心 ``center`` 的角动量平移 ``value``；非法时返回 ``None``。"""
        tensor = self.centers[center].shift(value)
        if tensor is None:
            return None
        centers = list(self.centers)
        centers[center] = tensor
        return dc_replace(self, centers=tuple(centers))

    def shift_order(self, value: int):
        if self.order + value < 0:
            return None
        return dc_replace(self, order=self.order + value)

    def set_order(self, order: int):
        return dc_replace(self, order=order)

    def replace(self, integrand: Operator):
        return dc_replace(self, integrand=integrand)

    def shift_prefix(self, value: int, center: int, keep_order: bool = False):
        """中心 ``center`` 的前缀阶数平移 ``value``。

        ``keep_order=False`` 时若所有前缀降为零阶则移除前缀（见 :meth:`reduce_prefixes`）。
        """
        prefixes = list(self._prefix_tuple())
        prefix = prefixes[center].shift(value)
        if prefix is None:
            return None
        prefixes[center] = prefix
        integral = dc_replace(self, prefixes=tuple(prefixes))
        if not keep_order:
            integral = integral.reduce_prefixes()
        return integral

    def reduce_prefixes(self):
        """全零前缀化简为空元组。"""
        if self.prefixes and all(p.order == 0 for p in self.prefixes):
            return dc_replace(self, prefixes=())
        return self

    def base(self):
        """去掉全部前缀，返回被求导的原始积分。"""
        return dc_replace(self, prefixes=())

    def label(self, use_order: bool = False) -> str:
        """文本标签，如 ``"PPSS"``、``"G1000_PSSS_1"``。"""
        label = "".join(t.label() for t in self.centers)
        if self.prefixes:
            label = "G" + "".join(str(k) for k in self.prefixes_order()) + "_" + label
        if use_order:
            label += f"_{self.order}"
        return label

    def components(self) -> list:
        """枚举全部笛卡尔分量：前缀分量 × 算符分量 × 各中心分量（首个中心在最外层）。"""
        prefix_comps = itertools.product(*(p.components() for p in self.prefixes))
        prefix_comps = list(prefix_comps) if self.prefixes else [()]
        center_comps = list(itertools.product(*(t.components() for t in self.centers)))
        return [
            self.component_type(
                centers=centers, integrand=opcomp, order=self.order, prefixes=prefixes
            )
            for prefixes in prefix_comps
            for opcomp in self.integrand.components()
            for centers in center_comps
        ]


@dataclass(frozen=True, order=True)
class I2CIntegral(Integral):
    """两中心积分描述符 :math:`(a|O|b)`。"""

    n_centers: ClassVar[int] = 2

    def __str__(self) -> str:
        a, b = (t.label() for t in self.centers)
        return f"({a}|{self.integrand.label()}|{b})"


@dataclass(frozen=True, order=True)
class I4CIntegral(Integral):
    """四中心积分描述符 :math:`(ab|O|cd)`。"""

    n_centers: ClassVar[int] = 4

    def __str__(self) -> str:
        a, b, c, d = (t.label() for t in self.centers)
        return f"({a}{b}|{c}{d})^{self.order}"


@dataclass(frozen=True, order=True)
class IntegralComponent:
    """积分分量基类（请使用 :class:`T2CIntegral` 或 :class:`T4CIntegral`）。"""

    centers: tuple[TensorComponent, ...]
    integrand: OperatorComponent = field(default_factory=OperatorComponent)
    order: int = 0
    prefixes: tuple[OperatorComponent, ...] = ()

    n_centers: ClassVar[int] = 0
    integral_type: ClassVar[type] = None

    def __post_init__(self):
        object.__setattr__(self, "centers", tuple(self.centers))
        object.__setattr__(self, "prefixes", tuple(self.prefixes))
        _check_centers(self, self.n_centers)

    def __getitem__(self, center: int) -> TensorComponent:
        return self.centers[center]

    def _prefix_tuple(self) -> tuple[OperatorComponent, ...]:
        if self.prefixes:
            return self.prefixes
        return tuple(OperatorComponent(GEOM_PREFIX) for _ in range(self.n_centers))

    def prefixes_order(self) -> tuple[int, ...]:
        return tuple(p.order for p in self._prefix_tuple())

    def shift(self, axis: str, value: int, center: int):
        comp = self.centers[center].shift(axis, value)
        if comp is None:
            return None
        centers = list(self.centers)
        centers[center] = comp
        return dc_replace(self, centers=tuple(centers))

    def shift_prefix(self, axis: str, value: int, center: int, keep_order: bool = False):
        prefixes = list(self._prefix_tuple())
        prefix = prefixes[center].shift(axis, value)
        if prefix is None:
            return None
        prefixes[center] = prefix
        comp = dc_replace(self, prefixes=tuple(prefixes))
        if not keep_order:
            comp = comp.reduce_prefixes()
        return comp

    def reduce_prefixes(self):
        if self.prefixes and all(p.order == 0 for p in self.prefixes):
            return dc_replace(self, prefixes=())
        return self

    def shift_operator(self, axis: str, value: int):
        integrand = self.integrand.shift(axis, value)
        if integrand is None:
            return None
        return dc_replace(self, integrand=integrand)

    def shift_order(self, value: int):
        if self.order + value < 0:
            return None
        return dc_replace(self, order=self.order + value)

    def replace(self, integrand: OperatorComponent):
        return dc_replace(self, integrand=integrand)

    def base(self):
        return dc_replace(self, prefixes=())

    def integral(self) -> Integral:
        """对应的描述符（每个分量替换为其所属壳层）。"""
        return self.integral_type(
            centers=tuple(Tensor(c.order) for c in self.centers),
            integrand=self.integrand.operator(),
            order=self.order,
            prefixes=tuple(
                Operator(p.name, Tensor(p.order)) for p in self.prefixes
            ),
        )

    def label(self) -> str:
        parts = [p.shape.label() for p in self.prefixes]
        if self.integrand.order > 0:
            parts.append(self.integrand.label())
        parts.extend(c.label() for c in self.centers)
        return "_".join(parts)


@dataclass(frozen=True, order=True)
class T2CIntegral(IntegralComponent):
    """两中心积分分量。"""

    n_centers: ClassVar[int] = 2


@dataclass(frozen=True, order=True)
class T4CIntegral(IntegralComponent):
    """四中心积分分量。"""

    n_centers: ClassVar[int] = 4


I2CIntegral.component_type = T2CIntegral
I4CIntegral.component_type = T4CIntegral
T2CIntegral.integral_type = I2CIntegral
T4CIntegral.integral_type = I4CIntegral

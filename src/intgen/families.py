"""积分族注册表

支持的算符族是封闭集合 :class:`IntegralFamily`；每个族在查找表中对应一条
:class:`FamilyInfo`（算符名称、中心数、项层/描述符层驱动器类型）。
外部通过 :func:`is_available` 判断文本标签是否受支持，再用 :func:`get_integral`
构造描述符，用 :func:`create_closure` / :func:`create_recursion_group` 得到所需子积分集合
与完全展开的递推组。

带几何导数前缀的积分先经（可选的）前缀 HRR 与中心前缀递推消去导数，
再交给该族的驱动器展开。
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from enum import Enum

from intgen.algebra.integral import I2CIntegral, I4CIntegral, Integral, IntegralComponent
from intgen.algebra.operator import (
    ELECTRIC_FIELD,
    ELECTRON_REPULSION,
    KINETIC_ENERGY,
    LINEAR_MOMENTUM,
    MULTIPOLE,
    NUCLEAR_POTENTIAL,
    OVERLAP,
)
from intgen.algebra.recursion import RecursionDist, RecursionGroup, RecursionTerm
from intgen.recursions import (
    T2CCenterDriver,
    T2CElectricFieldDriver,
    T2CElectronRepulsionDriver,
    T2CKineticEnergyDriver,
    T2CLinearMomentumDriver,
    T2CMultipoleDriver,
    T2CNuclearPotentialDriver,
    T2COverlapDriver,
    T4CCenterDriver,
    T4CElectronRepulsionDriver,
    T4CGeom01HrrElectronRepulsionDriver,
    T4CGeom10HrrElectronRepulsionDriver,
    T4CGeom11HrrElectronRepulsionDriver,
    T4CGeom20HrrElectronRepulsionDriver,
    V2ICenterDriver,
    V2IElectricFieldDriver,
    V2IElectronRepulsionDriver,
    V2IKineticEnergyDriver,
    V2ILinearMomentumDriver,
    V2IMultipoleDriver,
    V2INuclearPotentialDriver,
    V2IOverlapDriver,
    V4ICenterDriver,
    V4IElectronRepulsionDriver,
    V4IGeom01HrrElectronRepulsionDriver,
    V4IGeom10HrrElectronRepulsionDriver,
    V4IGeom11HrrElectronRepulsionDriver,
    V4IGeom20HrrElectronRepulsionDriver,
)

__all__ = [
    "IntegralFamily",
    "FamilyInfo",
    "FAMILIES",
    "get_family",
    "family_of",
    "is_available",
    "get_integral",
    "get_integrals",
    "create_closure",
    "expand_component",
    "create_recursion_group",
]


class IntegralFamily(Enum):
    OVERLAP = "overlap"
    KINETIC_ENERGY = "kinetic energy"
    NUCLEAR_POTENTIAL = "nuclear potential"
    MULTIPOLE = "multipole"
    LINEAR_MOMENTUM = "linear momentum"
    ELECTRIC_FIELD = "electric field"
    TWO_CENTER_ELECTRON_REPULSION = "two-center electron repulsion"
    ELECTRON_REPULSION = "electron repulsion"


@dataclass(frozen=True)
class FamilyInfo:
    """算符族描述。

    Attributes
    ----------
    operator : str
        被积算符名称。
    n_centers : int
        中心数（2 或 4）。
    tag : str
        进度输出中使用的短标签。
    term_driver : type
        项层驱动器类型。
    integral_driver : type
        描述符层驱动器类型。
    min_operator_order : int
        算符张量阶数下限（多极矩、电场至少为 1）。
    max_operator_order : int or None
        算符张量阶数上限（线性动量恰为 1）；``None`` 表示不限。
    """

    operator: str
    n_centers: int
    tag: str
    term_driver: type
    integral_driver: type
    min_operator_order: int = 0
    max_operator_order: int | None = None

    @property
    def integral_type(self) -> type:
        return I2CIntegral if self.n_centers == 2 else I4CIntegral


FAMILIES: dict[IntegralFamily, FamilyInfo] = {
    IntegralFamily.OVERLAP: FamilyInfo(
        OVERLAP, 2, "OVL", T2COverlapDriver, V2IOverlapDriver
    ),
    IntegralFamily.KINETIC_ENERGY: FamilyInfo(
        KINETIC_ENERGY, 2, "KIN", T2CKineticEnergyDriver, V2IKineticEnergyDriver
    ),
    IntegralFamily.NUCLEAR_POTENTIAL: FamilyInfo(
        NUCLEAR_POTENTIAL, 2, "NPOT", T2CNuclearPotentialDriver, V2INuclearPotentialDriver
    ),
    IntegralFamily.MULTIPOLE: FamilyInfo(
        MULTIPOLE, 2, "MPOL", T2CMultipoleDriver, V2IMultipoleDriver, min_operator_order=1
    ),
    IntegralFamily.LINEAR_MOMENTUM: FamilyInfo(
        LINEAR_MOMENTUM,
        2,
        "LMOM",
        T2CLinearMomentumDriver,
        V2ILinearMomentumDriver,
        min_operator_order=1,
        max_operator_order=1,
    ),
    IntegralFamily.ELECTRIC_FIELD: FamilyInfo(
        ELECTRIC_FIELD,
        2,
        "EFLD",
        T2CElectricFieldDriver,
        V2IElectricFieldDriver,
        min_operator_order=1,
    ),
    IntegralFamily.TWO_CENTER_ELECTRON_REPULSION: FamilyInfo(
        ELECTRON_REPULSION, 2, "ERI2C", T2CElectronRepulsionDriver, V2IElectronRepulsionDriver
    ),
    IntegralFamily.ELECTRON_REPULSION: FamilyInfo(
        ELECTRON_REPULSION, 4, "ERI", T4CElectronRepulsionDriver, V4IElectronRepulsionDriver
    ),
}

# (算符名称, 中心数) -> 算符族；两中心与四中心电子排斥共用算符名称
_BY_OPERATOR = {
    (info.operator, info.n_centers): family for family, info in FAMILIES.items()
}

# 前缀模式 -> (项层, 描述符层) 前缀 HRR 驱动器类型
_GEOM_HRR = {
    (1, 0, 0, 0): (T4CGeom10HrrElectronRepulsionDriver, V4IGeom10HrrElectronRepulsionDriver),
    (0, 0, 1, 0): (T4CGeom10HrrElectronRepulsionDriver, V4IGeom10HrrElectronRepulsionDriver),
    (1, 0, 1, 0): (T4CGeom10HrrElectronRepulsionDriver, V4IGeom10HrrElectronRepulsionDriver),
    (0, 1, 0, 0): (T4CGeom01HrrElectronRepulsionDriver, V4IGeom01HrrElectronRepulsionDriver),
    (0, 0, 0, 1): (T4CGeom01HrrElectronRepulsionDriver, V4IGeom01HrrElectronRepulsionDriver),
    (0, 1, 0, 1): (T4CGeom01HrrElectronRepulsionDriver, V4IGeom01HrrElectronRepulsionDriver),
    (1, 1, 0, 0): (T4CGeom11HrrElectronRepulsionDriver, V4IGeom11HrrElectronRepulsionDriver),
    (2, 0, 0, 0): (T4CGeom20HrrElectronRepulsionDriver, V4IGeom20HrrElectronRepulsionDriver),
}

def _instance(drivers: dict, driver_type: type):
    """在一次请求的驱动器表中取（或创建）驱动器；项层驱动器的展开缓存随表释放。"""
    if driver_type not in drivers:
        drivers[driver_type] = driver_type()
    return drivers[driver_type]


def get_family(label: str) -> IntegralFamily | None:
    """文本标签（不区分大小写）对应的算符族；不支持时返回 ``None``。"""
    try:
        return IntegralFamily(label.strip().lower())
    except ValueError:
        return None


def family_of(integral) -> IntegralFamily | None:
    """由被积算符名称与中心数反查积分（描述符或分量）所属的算符族。"""
    return _BY_OPERATOR.get((integral.integrand.name, integral.n_centers))


def is_available(label: str) -> bool:
    return get_family(label) is not None


def get_integral(
    label: str,
    angmoms,
    geom_orders=(),
    operator_order: int | None = None,
) -> Integral | None:
    """按标签构造积分描述符；标签不受支持时返回 ``None``。

    Parameters
    ----------
    label : str
        算符族标签，如 ``"electron repulsion"``。
    angmoms : sequence of int
        各中心角动量。
    geom_orders : sequence of int, optional
        各中心几何导数阶数。
    operator_order : int, optional
        算符张量阶数；默认取该族下限。
    """
    family = get_family(label)
    if family is None:
        return None
    info = FAMILIES[family]
    if len(angmoms) != info.n_centers:
        raise ValueError(
            f"{family.value} 需要 {info.n_centers} 个角动量，实际: {len(angmoms)}"
        )
    if operator_order is None:
        operator_order = info.min_operator_order
    if operator_order < info.min_operator_order:
        raise ValueError(
            f"{family.value} 的算符阶数至少为 {info.min_operator_order}，当前值: {operator_order}"
        )
    if info.max_operator_order is not None and operator_order > info.max_operator_order:
        raise ValueError(
            f"{family.value} 的算符阶数至多为 {info.max_operator_order}，当前值: {operator_order}"
        )
    return info.integral_type.from_orders(
        angmoms,
        info.operator,
        geom_orders=tuple(geom_orders),
        operator_order=operator_order,
    )


def get_integrals(
    label: str,
    max_ang_mom: int,
    geom_orders=(),
    operator_order: int | None = None,
) -> list[Integral]:
    """枚举所有角动量不超过 ``max_ang_mom`` 的描述符（不做置换对称裁剪）。"""
    family = get_family(label)
    if family is None:
        return []
    if max_ang_mom < 0:
        raise ValueError(f"最大角动量必须非负，当前值: {max_ang_mom}")
    n_centers = FAMILIES[family].n_centers
    return [
        get_integral(label, angmoms, geom_orders, operator_order)
        for angmoms in itertools.product(range(max_ang_mom + 1), repeat=n_centers)
    ]


def _geom_hrr_types(integral):
    if family_of(integral) is not IntegralFamily.ELECTRON_REPULSION or integral.is_simple():
        return None
    return _GEOM_HRR.get(integral.prefixes_order())


def _hrr_terminal(integral) -> bool:
    return integral[0] == 0 and integral[2] == 0


def create_closure(integral: Integral):
    """积分所需的全部子积分描述符（含自身），按全序排列。"""
    family = family_of(integral)
    if family is None:
        raise ValueError(f"不支持的被积算符: {integral.integrand.name!r}")
    info = FAMILIES[family]
    drivers = {}
    driver = _instance(drivers, info.integral_driver)
    result = driver.set_type([integral])
    if integral.is_simple():
        result.update(driver.apply_recursion(result))
        return result
    center = _instance(drivers, V2ICenterDriver if info.n_centers == 2 else V4ICenterDriver)
    prefixed = [integral]
    plain = []
    geom_types = _geom_hrr_types(integral)
    if geom_types is not None:
        geom_set = _instance(drivers, geom_types[1]).apply_recursion(result)
        result.update(geom_set)
        terminal = [i for i in geom_set if _hrr_terminal(i)]
        prefixed = [i for i in terminal if not i.is_simple()]
        plain = [i for i in terminal if i.is_simple()]
    plain_set = center.apply_bra_ket_vrr(prefixed)
    plain_set.update(plain)
    result.update(plain_set)
    result.update(driver.apply_recursion(plain_set))
    return result


def expand_component(comp: IntegralComponent, drivers: dict | None = None) -> RecursionDist:
    """将单个积分分量完全展开为终端积分分量的线性组合。

    ``drivers`` 为驱动器表（类型 -> 实例），同一张表上的多次展开共享展开缓存；
    默认为本次调用新建。
    """
    if drivers is None:
        drivers = {}
    family = family_of(comp)
    if family is None:
        raise ValueError(f"不支持的被积算符: {comp.integrand.name!r}")
    info = FAMILIES[family]
    root = RecursionTerm(comp)
    terms = [root]
    if comp.prefixes:
        descriptor = comp.integral()
        geom_types = _geom_hrr_types(descriptor)
        if geom_types is not None:
            terms = _flatten(_instance(drivers, geom_types[0]).apply_bra_ket_hrr, terms)
        center = _instance(drivers, T2CCenterDriver if info.n_centers == 2 else T4CCenterDriver)
        terms = _flatten(center.apply_bra_ket_vrr, terms)
    terms = _flatten(_instance(drivers, info.term_driver).apply_recursion, terms)
    dist = RecursionDist(root)
    for term in terms:
        dist.add(term)
    return dist.simplify()


def _flatten(apply, terms) -> list[RecursionTerm]:
    result = []
    for term in terms:
        result.extend(apply(term))
    return result


def create_recursion_group(integral: Integral, drivers: dict | None = None) -> RecursionGroup:
    """为描述符的每个笛卡尔分量构造完全展开的递推分布。

    各分量共享同一张驱动器表，展开缓存只在本次调用内有效。
    """
    if drivers is None:
        drivers = {}
    group = RecursionGroup()
    for comp in integral.components():
        group.add(expand_component(comp, drivers))
    return group

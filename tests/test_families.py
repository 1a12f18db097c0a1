"""积分族注册表与闭包/递推组入口测试

测试 families.py：标签查询、描述符构造、闭包性质与递推组。
"""

from functools import lru_cache

import numpy as np
import pytest
from _reference import Geometry, Reference

from intgen.algebra.integral import I2CIntegral, I4CIntegral
from intgen.algebra.operator import ELECTRON_REPULSION, MULTIPOLE, NUCLEAR_POTENTIAL, OVERLAP
from intgen.families import (
    FAMILIES,
    IntegralFamily,
    create_closure,
    create_recursion_group,
    family_of,
    get_family,
    get_integral,
    get_integrals,
    is_available,
)
from intgen.recursions import (
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


@pytest.mark.closure
@pytest.mark.quick
def test_is_available():
    """测试受支持标签（不区分大小写）与不受支持标签。"""
    for family in IntegralFamily:
        assert is_available(family.value)
    assert is_available("Electron Repulsion")
    assert not is_available("spin orbit")
    assert get_family("spin orbit") is None


@pytest.mark.closure
@pytest.mark.quick
def test_unknown_label_returns_none():
    """测试不支持的标签返回 None / 空列表而非抛出异常。"""
    assert get_integral("spin orbit", (0, 0)) is None
    assert get_integrals("spin orbit", 2) == []


@pytest.mark.closure
@pytest.mark.quick
def test_get_integral_validation():
    """测试角动量数目与多极算符阶数校验。"""
    with pytest.raises(ValueError, match="4 个角动量"):
        get_integral("electron repulsion", (1, 0))
    with pytest.raises(ValueError, match="算符阶数"):
        get_integral("multipole", (0, 0), operator_order=0)
    with pytest.raises(ValueError, match="非负"):
        get_integrals("overlap", -1)


@pytest.mark.closure
@pytest.mark.quick
def test_get_integral_types():
    """测试构造的描述符类型、算符与族反查。"""
    eri = get_integral("electron repulsion", (1, 0, 1, 0))
    assert isinstance(eri, I4CIntegral)
    assert eri.integrand.name == ELECTRON_REPULSION
    assert family_of(eri) is IntegralFamily.ELECTRON_REPULSION
    mpol = get_integral("multipole", (1, 0))
    assert isinstance(mpol, I2CIntegral)
    assert mpol.integrand.name == MULTIPOLE and mpol.integrand.order == 1
    assert get_integral("multipole", (1, 0), operator_order=2).integrand.order == 2
    assert FAMILIES[IntegralFamily.NUCLEAR_POTENTIAL].operator == NUCLEAR_POTENTIAL


@pytest.mark.closure
@pytest.mark.quick
def test_sixteen_eri_up_to_p():
    """测试 s、p 壳层组合得到 16 个 ERI 描述符，闭包覆盖全部并含 (SS|SS)^m。"""
    integrals = get_integrals("electron repulsion", 1)
    assert len(integrals) == 16
    assert len(set(integrals)) == 16
    merged = set()
    for integral in integrals:
        closure = create_closure(integral)
        assert integral in closure
        merged.update(closure)
    assert set(integrals) <= merged
    for m in range(5):
        assert get_integral("electron repulsion", (0, 0, 0, 0)).set_order(m) in merged


@pytest.mark.closure
@pytest.mark.quick
def test_closure_base_case():
    """测试 (SS|SS) 的闭包只含自身。"""
    root = get_integral("electron repulsion", (0, 0, 0, 0))
    assert list(create_closure(root)) == [root]
    ovl = get_integral("overlap", (0, 0))
    assert list(create_closure(ovl)) == [ovl]


@pytest.mark.closure
@pytest.mark.quick
def test_closure_idempotent_and_deterministic():
    """测试闭包的闭合性与枚举顺序确定性。"""
    for label, angmoms in (
        ("overlap", (2, 2)),
        ("kinetic energy", (2, 1)),
        ("nuclear potential", (1, 2)),
        ("multipole", (1, 1)),
        ("linear momentum", (2, 1)),
        ("electric field", (1, 1)),
        ("two-center electron repulsion", (2, 2)),
        ("electron repulsion", (1, 2, 1, 0)),
    ):
        root = get_integral(label, angmoms)
        closure = create_closure(root)
        for integral in closure:
            assert set(create_closure(integral)) <= set(closure), \
                f"{label} {integral.label()} 的闭包未包含在内"
        assert list(create_closure(root)) == list(closure), "两次枚举顺序应一致"


@pytest.mark.closure
@pytest.mark.quick
def test_closure_size_bounded():
    """测试闭包大小受 (角动量, 辅助阶数) 组合数约束。"""
    root = get_integral("electron repulsion", (2, 2, 2, 2))
    closure = create_closure(root)
    L = root.total_order()
    for integral in closure:
        assert integral.total_order() + integral.order <= L
    # 角动量总和不超过 L 且每个中心不超过 L 的组合数 × (m ≤ L)
    assert len(closure) <= (L + 1) ** 4 * (L + 1)


@pytest.mark.closure
@pytest.mark.quick
def test_closure_unsupported_operator():
    """测试不受支持的被积算符抛出 ValueError。"""
    bogus = I2CIntegral.from_orders((0, 0), "spin orbit")
    with pytest.raises(ValueError, match="不支持"):
        create_closure(bogus)


@pytest.mark.recursion
@pytest.mark.quick
def test_recursion_group_terminals_in_closure():
    """测试递推组的终端分量所属描述符均在闭包中。"""
    for label, angmoms in (
        ("kinetic energy", (1, 1)),
        ("nuclear potential", (2, 0)),
        ("linear momentum", (1, 2)),
        ("electric field", (1, 1)),
        ("two-center electron repulsion", (2, 1)),
        ("electron repulsion", (1, 1, 0, 1)),
    ):
        root = get_integral(label, angmoms)
        group = create_recursion_group(root)
        assert len(group) == len(root.components())
        assert group.roots() == root.components()
        closure = create_closure(root)
        for descriptor in group.split_terms():
            assert descriptor in closure, f"{descriptor.label()} 不在闭包中"


@pytest.mark.recursion
@pytest.mark.numeric
def test_recursion_group_values():
    """测试递推组各分布的数值与直接积分一致。"""
    ref = Reference(Geometry())
    root = get_integral("nuclear potential", (1, 1))
    for dist in create_recursion_group(root):
        comp = dist.root().integral
        assert np.isclose(ref.evaluate(dist), ref.value(comp), rtol=1e-8, atol=1e-11)


def _order(integral):
    """角动量与算符阶数之和；同阶时非重叠积分排在重叠积分之后。"""
    return (
        integral.total_order() + integral.integrand.order,
        0 if integral.integrand.name == OVERLAP else 1,
    )


def _bra_order(integral):
    return integral[0]


def _ket_order(integral):
    return integral[1] if integral.n_centers == 2 else integral[2]


# (驱动器类型, 单步函数名, 度量)；辅助阶数不计入度量
_STEP_MEASURES = [
    (V2IOverlapDriver, "bra_vrr", _order),
    (V2IOverlapDriver, "ket_vrr", _order),
    (V2IOverlapDriver, "bra_hrr", _bra_order),
    (V2IOverlapDriver, "ket_hrr", _ket_order),
    (V2IKineticEnergyDriver, "bra_vrr", _order),
    (V2IKineticEnergyDriver, "ket_vrr", _order),
    (V2IKineticEnergyDriver, "aux_vrr", _order),
    (V2INuclearPotentialDriver, "bra_vrr", _order),
    (V2INuclearPotentialDriver, "ket_vrr", _order),
    (V2INuclearPotentialDriver, "aux_vrr", _order),
    (V2IMultipoleDriver, "bra_vrr", _order),
    (V2IMultipoleDriver, "ket_vrr", _order),
    (V2IMultipoleDriver, "operator_vrr", _order),
    (V2ILinearMomentumDriver, "op_vrr", _order),
    (V2IElectricFieldDriver, "bra_vrr", _order),
    (V2IElectricFieldDriver, "ket_vrr", _order),
    (V2IElectricFieldDriver, "operator_vrr", _order),
    (V2IElectronRepulsionDriver, "bra_vrr", _order),
    (V2IElectronRepulsionDriver, "ket_vrr", _order),
    (V4IElectronRepulsionDriver, "bra_hrr", _bra_order),
    (V4IElectronRepulsionDriver, "ket_hrr", _ket_order),
    (V4IElectronRepulsionDriver, "bra_vrr", _order),
    (V4IElectronRepulsionDriver, "ket_vrr", _order),
    (V4IElectronRepulsionDriver, "full_vrr", _order),
    (V4IGeom10HrrElectronRepulsionDriver, "bra_hrr", _bra_order),
    (V4IGeom10HrrElectronRepulsionDriver, "ket_hrr", _ket_order),
    (V4IGeom01HrrElectronRepulsionDriver, "bra_hrr", _bra_order),
    (V4IGeom01HrrElectronRepulsionDriver, "ket_hrr", _ket_order),
    (V4IGeom11HrrElectronRepulsionDriver, "bra_hrr", _bra_order),
    (V4IGeom20HrrElectronRepulsionDriver, "bra_hrr", _bra_order),
]

_MEASURE_REQUESTS = [
    ("overlap", (2, 2), (), None),
    ("kinetic energy", (2, 1), (), None),
    ("nuclear potential", (1, 2), (), None),
    ("nuclear potential", (1, 1), (1, 1), None),
    ("multipole", (1, 1), (), 2),
    ("linear momentum", (2, 1), (), None),
    ("electric field", (1, 1), (), 2),
    ("two-center electron repulsion", (2, 1), (), None),
    ("two-center electron repulsion", (1, 1), (1, 0), None),
    ("electron repulsion", (1, 1, 1, 1), (), None),
    ("electron repulsion", (1, 0, 1, 0), (1, 0, 0, 0), None),
    ("electron repulsion", (1, 1, 1, 1), (0, 1, 0, 1), None),
    ("electron repulsion", (1, 1, 0, 0), (2, 0, 0, 0), None),
    ("electron repulsion", (1, 1, 1, 0), (1, 1, 0, 0), None),
]


@lru_cache(maxsize=None)
def _measure_domain():
    """各请求闭包的并集，另加重叠积分 bra/ket 水平递推闭包。"""
    domain = set()
    for label, angmoms, geom_orders, operator_order in _MEASURE_REQUESTS:
        root = get_integral(label, angmoms, geom_orders, operator_order)
        domain.update(create_closure(root))
    ovl = V2IOverlapDriver()
    domain.update(ovl.create_bra_hrr_recursion([get_integral("overlap", (3, 1))]))
    domain.update(ovl.create_ket_hrr_recursion([get_integral("overlap", (1, 3))]))
    return frozenset(domain)


@pytest.mark.closure
@pytest.mark.quick
@pytest.mark.parametrize(
    "driver_type, step_name, measure",
    _STEP_MEASURES,
    ids=[f"{d.__name__}.{s}" for d, s, _ in _STEP_MEASURES],
)
def test_step_siblings_strictly_decrease(driver_type, step_name, measure):
    """测试每个单步函数返回的子积分在对应度量下严格小于父积分。"""
    step = getattr(driver_type(), step_name)
    applied = 0
    for integral in _measure_domain():
        for sub in step(integral):
            applied += 1
            assert measure(sub) < measure(integral), \
                f"{step_name}: {sub.label()} 未低于 {integral.label()}"
    assert applied > 0, f"{driver_type.__name__}.{step_name} 在测试集合上从未生效"


@pytest.mark.closure
@pytest.mark.quick
def test_center_step_lowers_prefix_order():
    """测试前缀递推每步使目标中心的前缀阶数严格降低。"""
    applied = 0
    for integral in _measure_domain():
        driver = V2ICenterDriver() if integral.n_centers == 2 else V4ICenterDriver()
        for center in range(integral.n_centers):
            for sub in driver.bra_ket_vrr(integral, center):
                applied += 1
                assert sub.prefixes_order()[center] < integral.prefixes_order()[center]
    assert applied > 0


@pytest.mark.closure
@pytest.mark.quick
def test_family_of_distinguishes_center_count():
    """测试两中心与四中心电子排斥积分共用算符名称但属于不同族。"""
    eri2c = get_integral("two-center electron repulsion", (1, 0))
    eri4c = get_integral("electron repulsion", (1, 0, 0, 0))
    assert eri2c.integrand.name == eri4c.integrand.name == ELECTRON_REPULSION
    assert family_of(eri2c) is IntegralFamily.TWO_CENTER_ELECTRON_REPULSION
    assert family_of(eri4c) is IntegralFamily.ELECTRON_REPULSION
    assert all(i.n_centers == 2 for i in create_closure(eri2c))


@pytest.mark.closure
@pytest.mark.quick
def test_operator_order_bounds():
    """测试线性动量算符阶数恰为 1，电场算符阶数至少为 1。"""
    assert get_integral("linear momentum", (1, 1)).integrand.order == 1
    with pytest.raises(ValueError, match="至多为 1"):
        get_integral("linear momentum", (1, 1), operator_order=2)
    assert get_integral("electric field", (0, 0)).integrand.order == 1
    assert get_integral("electric field", (0, 0), operator_order=3).integrand.order == 3
    with pytest.raises(ValueError, match="至少为 1"):
        get_integral("electric field", (0, 0), operator_order=0)


def _cache_sizes(drivers):
    return {
        driver_type: sum(len(cache) for cache in driver._caches.values())
        for driver_type, driver in drivers.items()
        if hasattr(driver, "_caches")
    }


@pytest.mark.recursion
@pytest.mark.quick
def test_driver_tables_are_per_request():
    """测试展开缓存只属于调用方提供的驱动器表，后续请求不会写入。"""
    first = {}
    create_recursion_group(get_integral("kinetic energy", (2, 1)), drivers=first)
    sizes = _cache_sizes(first)
    assert sizes and all(n > 0 for n in sizes.values())

    create_recursion_group(get_integral("kinetic energy", (2, 2)))
    create_recursion_group(get_integral("overlap", (3, 3)))
    assert _cache_sizes(first) == sizes

    second = {}
    create_recursion_group(get_integral("kinetic energy", (2, 1)), drivers=second)
    assert set(second) == set(first)
    assert all(second[t] is not first[t] for t in first)


@pytest.mark.recursion
@pytest.mark.numeric
@pytest.mark.parametrize(
    "label, angmoms, operator_order",
    [
        ("linear momentum", (1, 1), None),
        ("two-center electron repulsion", (1, 1), None),
        ("electric field", (1, 0), 1),
    ],
)
def test_two_center_family_group_values(label, angmoms, operator_order):
    """测试新增两中心族的递推组数值与直接积分一致。"""
    ref = Reference(Geometry())
    root = get_integral(label, angmoms, operator_order=operator_order)
    closure = create_closure(root)
    for dist in create_recursion_group(root):
        comp = dist.root().integral
        assert np.isclose(ref.evaluate(dist), ref.value(comp), rtol=1e-6, atol=1e-9)
        for descriptor in dist.unique_integrals():
            assert descriptor.integral() in closure

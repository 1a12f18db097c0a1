"""电场积分递推测试

测试 recursions/electric_field.py：电场积分即核吸引辅助积分对点电荷坐标的导数，
参考值对点电荷坐标做中心差分得到。
"""

import numpy as np
import pytest
from _reference import Geometry, Reference

from intgen.algebra.integral import I2CIntegral, T2CIntegral
from intgen.algebra.operator import ELECTRIC_FIELD, NUCLEAR_POTENTIAL, OperatorComponent
from intgen.algebra.recursion import RecursionTerm
from intgen.algebra.tensor import TensorComponent
from intgen.recursions.electric_field import T2CElectricFieldDriver, V2IElectricFieldDriver
from intgen.recursions.factors import ZETA, vector


def _efld(a, b, c, order=0):
    comp = T2CIntegral(
        centers=(TensorComponent(*a), TensorComponent(*b)),
        integrand=OperatorComponent(ELECTRIC_FIELD, TensorComponent(*c)),
        order=order,
    )
    return RecursionTerm(comp)


@pytest.mark.recursion
@pytest.mark.quick
def test_operator_vrr_first_order():
    """测试 (s|A1_x|s)^m = 2ζ PC_x (s|A|s)^{m+1}。"""
    driver = T2CElectricFieldDriver()
    dist = driver.operator_vrr(_efld((0, 0, 0), (0, 0, 0), (1, 0, 0)), "x")
    assert len(dist) == 1
    assert dist[0].integrand() == OperatorComponent(NUCLEAR_POTENTIAL)
    assert dist[0].integral.order == 1
    assert dist[0].factor_order(ZETA) == 1
    assert dist[0].factor_order(vector("PC", "x")) == 1
    assert dist[0].prefactor == 2


@pytest.mark.recursion
@pytest.mark.quick
def test_operator_vrr_second_order():
    """测试 (s|A1_xx|s) 含 -2ζ (s|A|s)^{m+1} 降阶项。"""
    driver = T2CElectricFieldDriver()
    dist = driver.operator_vrr(_efld((0, 0, 0), (0, 0, 0), (2, 0, 0)), "x")
    assert len(dist) == 2
    assert dist[0].integrand() == OperatorComponent(ELECTRIC_FIELD, TensorComponent(1, 0, 0))
    assert dist[1].integrand() == OperatorComponent(NUCLEAR_POTENTIAL)
    assert dist[1].prefactor == -2
    assert driver.operator_vrr(_efld((1, 0, 0), (0, 0, 0), (1, 0, 0)), "x") is None, \
        "角动量非零时不降低算符"


@pytest.mark.recursion
@pytest.mark.quick
def test_bra_vrr_operator_lowering_term():
    """测试 (px|A1_x|s)^0 的 bra 递推含 (s|A|s)^1 项。"""
    driver = T2CElectricFieldDriver()
    dist = driver.bra_vrr(_efld((1, 0, 0), (0, 0, 0), (1, 0, 0)), "x")
    assert len(dist) == 3
    lowered = [t for t in dist if t.integrand().name == NUCLEAR_POTENTIAL]
    assert len(lowered) == 1
    assert lowered[0].integral.order == 1 and lowered[0].prefactor == 1
    assert driver.bra_vrr(_efld((1, 0, 0), (0, 0, 0), (0, 0, 0)), "x") is None, \
        "零阶算符属于核吸引驱动器"


@pytest.mark.recursion
@pytest.mark.numeric
@pytest.mark.parametrize(
    "angmoms, op_order, h, rtol",
    [
        ((0, 0), 1, 1e-4, 1e-6),
        ((1, 0), 1, 1e-4, 1e-6),
        ((1, 1), 1, 1e-4, 1e-6),
        ((0, 1), 2, 1e-3, 1e-4),
    ],
)
def test_expansion_matches_reference(angmoms, op_order, h, rtol):
    """测试电场与场梯度积分展开后与中心差分参考值一致。"""
    driver = T2CElectricFieldDriver()
    ref = Reference(Geometry(), h=h)
    integral = I2CIntegral.from_orders(angmoms, ELECTRIC_FIELD, operator_order=op_order)
    for comp in integral.components():
        dist = driver.apply_recursion(RecursionTerm(comp))
        for term in dist:
            assert term.integrand() == OperatorComponent(NUCLEAR_POTENTIAL)
            assert term.integral.centers == (TensorComponent(), TensorComponent())
        expected = ref.value(comp)
        actual = ref.evaluate(dist)
        assert np.isclose(actual, expected, rtol=rtol, atol=rtol * 1e-2), \
            f"{comp.label()}: 递推 {actual:.12e}, 参考 {expected:.12e}"


@pytest.mark.closure
@pytest.mark.quick
def test_descriptor_closure():
    """测试 (P|A1[P]|S) 闭包：降到零阶算符后为核吸引积分。"""
    driver = V2IElectricFieldDriver()
    root = I2CIntegral.from_orders((1, 0), ELECTRIC_FIELD, operator_order=1)
    assert driver.bra_vrr(root) == {
        I2CIntegral.from_orders((0, 0), ELECTRIC_FIELD, operator_order=1),
        I2CIntegral.from_orders((0, 0), ELECTRIC_FIELD, order=1, operator_order=1),
        I2CIntegral.from_orders((0, 0), NUCLEAR_POTENTIAL, order=1),
    }
    closure = driver.apply_recursion([root])
    assert I2CIntegral.from_orders((0, 0), NUCLEAR_POTENTIAL, order=2) in closure
    for integral in closure:
        if integral.integrand.name == ELECTRIC_FIELD:
            assert integral.integrand.order > 0
        else:
            assert integral.integrand.name == NUCLEAR_POTENTIAL
    assert driver.apply_recursion(closure) == closure

"""笛卡尔 → 球谐变换系数表测试

测试 spherical.py。
"""

import numpy as np
import pytest

from intgen.algebra.tensor import Tensor
from intgen.spherical import SPHERICAL_CONSTANTS, SphericalMomentum


@pytest.mark.algebra
@pytest.mark.quick
def test_component_counts():
    """测试球谐分量数目 2l+1。"""
    for l in range(5):
        assert len(SphericalMomentum(l)) == 2 * l + 1


@pytest.mark.algebra
@pytest.mark.quick
def test_d_shell_xx_pairs():
    """测试 d 壳层 xx 分量出现在 m=0 与 m=+2 分量中。"""
    pairs = SphericalMomentum(2).select_pairs(0)
    assert pairs == [(2, "-1.0"), (4, "0.5 * f2_3")]


@pytest.mark.algebra
@pytest.mark.quick
def test_every_cartesian_component_used():
    """测试每个笛卡尔分量至少参与一个球谐分量，索引不越界。"""
    for l in range(5):
        sph = SphericalMomentum(l)
        ncart = len(Tensor(l).components())
        for cart in range(ncart):
            pairs = sph.select_pairs(cart)
            assert pairs, f"l={l} 笛卡尔分量 {cart} 未被使用"
            assert all(0 <= index < len(sph) for index, _ in pairs)
        assert sph.select_pairs(ncart) == []


@pytest.mark.algebra
@pytest.mark.quick
def test_evaluate_factors():
    """测试系数文本求值。"""
    assert np.isclose(SphericalMomentum.evaluate("0.5 * f2_3"), np.sqrt(3.0))
    assert np.isclose(SphericalMomentum.evaluate("-f3_5"), -np.sqrt(2.5))
    assert np.isclose(SphericalMomentum.evaluate("-3.0"), -3.0)
    assert np.isclose(float(SPHERICAL_CONSTANTS["f4_17"]), 4.0 * np.sqrt(17.5))


@pytest.mark.algebra
@pytest.mark.quick
def test_d_shell_orthogonality():
    """测试 d 壳层变换：各球谐分量在笛卡尔度规下相互正交。

    笛卡尔 d 函数的重叠度规（同一中心、同一指数，按 ``xx:xy = 3:1`` 归一）：
    ``<xx|xx> = 3``、``<xx|yy> = 1``、``<xy|xy> = 1``。
    """
    comps = Tensor(2).components()
    metric = np.zeros((6, 6))
    for i, ci in enumerate(comps):
        for j, cj in enumerate(comps):
            powers = np.array(ci.to_tuple()) + np.array(cj.to_tuple())
            if np.all(powers % 2 == 0):
                # ∫ x^{2k} e^{-x²} 的比例 (2k-1)!!
                metric[i, j] = np.prod([max(1, _double_factorial(p - 1)) for p in powers])
    sph = SphericalMomentum(2)
    coef = np.zeros((len(sph), 6))
    for cart in range(6):
        for index, factor in sph.select_pairs(cart):
            coef[index, cart] = SphericalMomentum.evaluate(factor)
    gram = coef @ metric @ coef.T
    off = gram - np.diag(np.diag(gram))
    assert np.allclose(off, 0.0, atol=1e-12), f"非对角元不为零:\n{gram}"


def _double_factorial(n: int) -> int:
    result = 1
    while n > 1:
        result *= n
        n -= 2
    return result


@pytest.mark.algebra
@pytest.mark.quick
def test_invalid_angmom():
    """测试超出表格范围的角动量抛出 ValueError。"""
    with pytest.raises(ValueError, match="0-4"):
        SphericalMomentum(5)
    assert SphericalMomentum(3).get_factors()[0].startswith("f3_5")
    assert SphericalMomentum(0).get_factors() == []

"""intgen 包
=================

分子积分计算核生成器的符号递推引擎（Obara–Saika 型递推）。

本包提供：

- 积分描述符/分量、递推项与递推分布的代数数据模型（:mod:`intgen.algebra`）
- 重叠、动能、核吸引、多极矩、电子排斥积分及其几何导数的单步递推驱动器
  （:mod:`intgen.recursions`）
- 子积分闭包与完全展开的递推组构造（:mod:`intgen.families`）

生成的集合与递推分布供（包外的）代码输出层渲染为计算核源代码。

注：本项目所有文档与注释均使用中文，Docstring 采用 Sphinx + NumPy 风格，公式使用 ``:math:`` 标记。
"""

from intgen.algebra import (
    Factor,
    I2CIntegral,
    I4CIntegral,
    IntegralSet,
    Operator,
    RecursionDist,
    RecursionGroup,
    RecursionTerm,
    SI2CIntegrals,
    SI4CIntegrals,
    T2CIntegral,
    T4CIntegral,
    Tensor,
    TensorComponent,
)
from intgen.families import (
    IntegralFamily,
    create_closure,
    create_recursion_group,
    get_integral,
    get_integrals,
    is_available,
)
from intgen.config import GeneratorConfig
from intgen.generator import run_generator
from intgen.spherical import SphericalMomentum

__all__ = [
    "Tensor",
    "TensorComponent",
    "Operator",
    "Factor",
    "I2CIntegral",
    "I4CIntegral",
    "T2CIntegral",
    "T4CIntegral",
    "RecursionTerm",
    "RecursionDist",
    "RecursionGroup",
    "IntegralSet",
    "SI2CIntegrals",
    "SI4CIntegrals",
    "IntegralFamily",
    "is_available",
    "get_integral",
    "get_integrals",
    "create_closure",
    "create_recursion_group",
    "GeneratorConfig",
    "run_generator",
    "SphericalMomentum",
]

__version__ = "0.1.0"

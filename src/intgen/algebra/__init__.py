"""递推代数数据模型：张量、算符、因子、积分、递推项与有序集合。"""

from intgen.algebra.tensor import AXES, Tensor, TensorComponent, axis_index
from intgen.algebra.operator import (
    ELECTRIC_FIELD,
    ELECTRON_REPULSION,
    GEOM_PREFIX,
    KINETIC_ENERGY,
    LINEAR_MOMENTUM,
    MULTIPOLE,
    NUCLEAR_POTENTIAL,
    OVERLAP,
    Operator,
    OperatorComponent,
)
from intgen.algebra.factor import Factor
from intgen.algebra.integral import (
    I2CIntegral,
    I4CIntegral,
    Integral,
    IntegralComponent,
    T2CIntegral,
    T4CIntegral,
)
from intgen.algebra.recursion import (
    R2CDist,
    R2CTerm,
    R2Group,
    R4CDist,
    R4CTerm,
    R4Group,
    RecursionDist,
    RecursionGroup,
    RecursionTerm,
)
from intgen.algebra.integral_set import IntegralSet, SI2CIntegrals, SI4CIntegrals

__all__ = [
    "AXES",
    "axis_index",
    "Tensor",
    "TensorComponent",
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
    "Factor",
    "Integral",
    "I2CIntegral",
    "I4CIntegral",
    "IntegralComponent",
    "T2CIntegral",
    "T4CIntegral",
    "RecursionTerm",
    "RecursionDist",
    "RecursionGroup",
    "R2CTerm",
    "R4CTerm",
    "R2CDist",
    "R4CDist",
    "R2Group",
    "R4Group",
    "IntegralSet",
    "SI2CIntegrals",
    "SI4CIntegrals",
]

"""各算符族的递推驱动器（项层 ``T*`` 与描述符层 ``V*``）。"""

from intgen.recursions.base import IntegralDriver, TermDriver, select_minimal
from intgen.recursions.overlap import T2COverlapDriver, V2IOverlapDriver
from intgen.recursions.kinetic import T2CKineticEnergyDriver, V2IKineticEnergyDriver
from intgen.recursions.nuclear_potential import (
    T2CNuclearPotentialDriver,
    V2INuclearPotentialDriver,
)
from intgen.recursions.multipole import T2CMultipoleDriver, V2IMultipoleDriver
from intgen.recursions.linear_momentum import T2CLinearMomentumDriver, V2ILinearMomentumDriver
from intgen.recursions.electric_field import T2CElectricFieldDriver, V2IElectricFieldDriver
from intgen.recursions.two_center_eri import (
    T2CElectronRepulsionDriver,
    V2IElectronRepulsionDriver,
)
from intgen.recursions.electron_repulsion import (
    T4CElectronRepulsionDriver,
    V4IElectronRepulsionDriver,
)
from intgen.recursions.center import (
    T2CCenterDriver,
    T4CCenterDriver,
    V2ICenterDriver,
    V4ICenterDriver,
)
from intgen.recursions.geom_hrr import (
    GEOM_PATTERNS,
    T4CGeom01HrrElectronRepulsionDriver,
    T4CGeom10HrrElectronRepulsionDriver,
    T4CGeom11HrrElectronRepulsionDriver,
    T4CGeom20HrrElectronRepulsionDriver,
    V4IGeom01HrrElectronRepulsionDriver,
    V4IGeom10HrrElectronRepulsionDriver,
    V4IGeom11HrrElectronRepulsionDriver,
    V4IGeom20HrrElectronRepulsionDriver,
)

__all__ = [
    "TermDriver",
    "IntegralDriver",
    "select_minimal",
    "T2COverlapDriver",
    "V2IOverlapDriver",
    "T2CKineticEnergyDriver",
    "V2IKineticEnergyDriver",
    "T2CNuclearPotentialDriver",
    "V2INuclearPotentialDriver",
    "T2CMultipoleDriver",
    "V2IMultipoleDriver",
    "T2CLinearMomentumDriver",
    "V2ILinearMomentumDriver",
    "T2CElectricFieldDriver",
    "V2IElectricFieldDriver",
    "T2CElectronRepulsionDriver",
    "V2IElectronRepulsionDriver",
    "T4CElectronRepulsionDriver",
    "V4IElectronRepulsionDriver",
    "T2CCenterDriver",
    "T4CCenterDriver",
    "V2ICenterDriver",
    "V4ICenterDriver",
    "GEOM_PATTERNS",
    "T4CGeom10HrrElectronRepulsionDriver",
    "T4CGeom01HrrElectronRepulsionDriver",
    "T4CGeom11HrrElectronRepulsionDriver",
    "T4CGeom20HrrElectronRepulsionDriver",
    "V4IGeom10HrrElectronRepulsionDriver",
    "V4IGeom01HrrElectronRepulsionDriver",
    "V4IGeom11HrrElectronRepulsionDriver",
    "V4IGeom20HrrElectronRepulsionDriver",
]

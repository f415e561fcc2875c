from pyBulkMicro.activation import Activation, AerosolMode
from pyBulkMicro.active_region import ActiveRegion
from pyBulkMicro.config import BulkMicroConfig, ConfigConstants, MicrophysicsScheme
from pyBulkMicro.driver import BulkMicrophysics, make_state
from pyBulkMicro.rain_parameters import RainParameters
from pyBulkMicro.state import RainShape, RainState, Tendencies, Thermodynamics


__all__ = [
    "Activation",
    "AerosolMode",
    "ActiveRegion",
    "BulkMicroConfig",
    "BulkMicrophysics",
    "ConfigConstants",
    "MicrophysicsScheme",
    "RainParameters",
    "RainShape",
    "RainState",
    "Tendencies",
    "Thermodynamics",
    "make_state",
]

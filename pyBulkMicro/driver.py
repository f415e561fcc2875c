from typing import Optional, Sequence, Tuple

from ndsl import QuantityFactory, StencilFactory
from ndsl.dsl.typing import Float
from ndsl.logging import ndsl_log
from pyBulkMicro.accretion import Accretion
from pyBulkMicro.activation import Activation, AerosolMode
from pyBulkMicro.active_region import ActiveRegion
from pyBulkMicro.autoconversion import Autoconversion
from pyBulkMicro.cloud_sedimentation import CloudSedimentation
from pyBulkMicro.config import BulkMicroConfig, ConfigConstants
from pyBulkMicro.evaporation import Evaporation
from pyBulkMicro.rain_parameters import RainParameters
from pyBulkMicro.rain_sedimentation import RainSedimentation
from pyBulkMicro.state import RainShape, RainState, Tendencies, Thermodynamics


def make_state(
    quantity_factory: QuantityFactory,
) -> Tuple[Thermodynamics, RainState, RainShape, Tendencies]:
    """Helper function to allocate empty microphysics state"""
    return (
        Thermodynamics.make(quantity_factory),
        RainState.make(quantity_factory),
        RainShape.make(quantity_factory),
        Tendencies.make(quantity_factory),
    )


class BulkMicrophysics:
    """
    Two-moment bulk warm rain microphysics.

    Computes the tendencies of rain mass and number, total water and liquid
    water potential temperature from the current state. The tendencies are
    added to those already present in the Tendencies container, except for
    the precipitation flux which is overwritten.

    __init__
        - derive configuration constants and construct every process
        Arguments: StencilFactory, QuantityFactory, BulkMicroConfig and
        optionally a replacement for the rain shape derivation

    __call__
        - update the cloud and rain active region
        - derive the rain size distribution
        - autoconversion, accretion, cloud and rain sedimentation, evaporation
        - aerosol activation when aerosol modes are given
    """

    def __init__(
        self,
        stencil_factory: StencilFactory,
        quantity_factory: QuantityFactory,
        config: BulkMicroConfig,
        rain_parameters: Optional[RainParameters] = None,
    ):
        if stencil_factory.grid_indexing.n_halo != 0:
            raise ValueError("halo needs to be zero for bulk microphysics")

        self.stencil_factory = stencil_factory
        self.quantity_factory = quantity_factory
        self.config = config
        self.config_dependent_constants = ConfigConstants.make(config)

        if rain_parameters is None:
            rain_parameters = RainParameters(stencil_factory, config)
        self.rain_parameters = rain_parameters

        self.autoconversion = Autoconversion(
            stencil_factory, config, self.config_dependent_constants
        )
        self.accretion = Accretion(stencil_factory, config)
        self.cloud_sedimentation = CloudSedimentation(
            stencil_factory,
            quantity_factory,
            config,
            self.config_dependent_constants,
        )
        self.rain_sedimentation = RainSedimentation(
            stencil_factory,
            quantity_factory,
            config,
            self.config_dependent_constants,
            self.rain_parameters,
        )
        self.evaporation = Evaporation(stencil_factory, quantity_factory, config)
        self.activation = Activation(stencil_factory, quantity_factory, config)

        ndsl_log.info(
            f"Bulk microphysics: scheme {config.SCHEME.value}, "
            f"lognormal rain sedimentation {config.L_LOGNORMAL}, "
            f"constant mu {config.L_MUR_CST}"
        )

    def make_region(self) -> ActiveRegion:
        """Helper function to allocate an empty active region"""
        return ActiveRegion(
            self.stencil_factory,
            self.quantity_factory,
            self.config.QCMIN,
            self.config.QRMIN,
        )

    def __call__(
        self,
        thermo: Thermodynamics,
        rain: RainState,
        region: ActiveRegion,
        shape: RainShape,
        tendencies: Tendencies,
        dt: Float,
        aerosol_modes: Optional[Sequence[AerosolMode]] = None,
        in_cloud_mode: Optional[AerosolMode] = None,
    ):
        if dt <= 0.0:
            raise ValueError(f"Time step must be positive, got {dt}")
        if aerosol_modes and in_cloud_mode is None:
            raise ValueError("Aerosol activation needs an in-cloud mode")

        region.update_cloud(thermo.ql0)
        region.update_rain(rain.qr, rain.nr)

        self.rain_parameters(rain.qr, rain.nr, thermo.rhof, shape)

        self.autoconversion(thermo, rain, region, tendencies)
        self.accretion(thermo, rain, shape, region, tendencies)
        self.cloud_sedimentation(thermo, region, tendencies)
        self.rain_sedimentation(thermo, rain, shape, region, tendencies, dt)
        self.evaporation(thermo, rain, shape, region, tendencies, dt)

        if aerosol_modes:
            self.activation(thermo, aerosol_modes, in_cloud_mode, dt)

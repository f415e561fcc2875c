import numpy as np

from ndsl import QuantityFactory, StencilFactory, orchestrate
from ndsl.constants import X_DIM, Y_DIM, Z_DIM
from ndsl.dsl.typing import Float
from ndsl.logging import ndsl_log
from pyBulkMicro.active_region import ActiveRegion
from pyBulkMicro.config import BulkMicroConfig, ConfigConstants
from pyBulkMicro.rain_parameters import RainParameters
from pyBulkMicro.rain_sedimentation.stencils import (
    apply_rain_flux,
    copy_rain,
    precipitation_flux,
    rain_flux_gamma,
    rain_flux_kk,
    rain_flux_lognormal,
    sedimentation_tendency,
)
from pyBulkMicro.rain_sedimentation.temporaries import Temporaries
from pyBulkMicro.state import RainShape, RainState, Tendencies, Thermodynamics


def number_of_substeps(wfallmax: float, dt: float, dzf_min: float) -> int:
    """Sub-steps needed so that rain falling at wfallmax crosses at most one layer."""
    return max(1, int(np.ceil(wfallmax * dt / dzf_min)))


class RainSedimentation:
    """
    Sedimentation of rain mass and number, sub-stepped under a CFL bound
    on the maximum fall speed.

    The rain mask and base of the active region are updated as rain falls
    into the levels below. The base is lowered by one level per sub-step and
    is never raised.

    Reference: modbulkmicro sedimentation_rain (Stevens & Seifert 2008).
    """

    def __init__(
        self,
        stencil_factory: StencilFactory,
        quantity_factory: QuantityFactory,
        config: BulkMicroConfig,
        config_dependent_constants: ConfigConstants,
        rain_parameters: RainParameters,
    ):
        self.config = config
        self._rain_parameters = rain_parameters

        # Initalize temporaries
        self.temporaries = Temporaries.make(quantity_factory)

        orchestrate(obj=self, config=stencil_factory.config.dace_config)

        # Initalize stencils
        self._copy_rain = stencil_factory.from_dims_halo(
            func=copy_rain,
            compute_dims=[X_DIM, Y_DIM, Z_DIM],
        )

        if config.is_sb and config.L_LOGNORMAL:
            self._rain_flux = stencil_factory.from_dims_halo(
                func=rain_flux_lognormal,
                compute_dims=[X_DIM, Y_DIM, Z_DIM],
                externals={
                    "dgr_factor": config_dependent_constants.DGR_FACTOR,
                    "sig2_gr": config_dependent_constants.SIG2_GR,
                },
            )
        elif config.is_sb:
            self._rain_flux = stencil_factory.from_dims_halo(
                func=rain_flux_gamma,
                compute_dims=[X_DIM, Y_DIM, Z_DIM],
                externals={
                    "a_tvsb": config.A_TVSB,
                    "b_tvsb": config.B_TVSB,
                    "c_tvsb": config.C_TVSB,
                },
            )
        else:
            self._rain_flux = stencil_factory.from_dims_halo(
                func=rain_flux_kk,
                compute_dims=[X_DIM, Y_DIM, Z_DIM],
            )

        self._precipitation_flux = stencil_factory.from_dims_halo(
            func=precipitation_flux,
            compute_dims=[X_DIM, Y_DIM, Z_DIM],
        )
        self._apply_rain_flux = stencil_factory.from_dims_halo(
            func=apply_rain_flux,
            compute_dims=[X_DIM, Y_DIM, Z_DIM],
        )
        self._sedimentation_tendency = stencil_factory.from_dims_halo(
            func=sedimentation_tendency,
            compute_dims=[X_DIM, Y_DIM, Z_DIM],
        )

    def __call__(
        self,
        thermo: Thermodynamics,
        rain: RainState,
        shape: RainShape,
        region: ActiveRegion,
        tendencies: Tendencies,
        dt: Float,
    ):
        tendencies.precep.view[:] = 0

        if region.rain_is_empty:
            return

        temporaries = self.temporaries
        n_spl = number_of_substeps(
            self.config.WFALLMAX, dt, float(thermo.dzf.view[:].min())
        )
        dt_spl = Float(dt / n_spl)
        ndsl_log.debug(f"Rain sedimentation: {n_spl} sub-steps of {dt_spl} s")

        for jn in range(n_spl):
            if jn == 0:
                self._copy_rain(rain.qr, rain.nr, temporaries.qr_spl, temporaries.nr_spl)
                substep_shape = shape
            else:
                # admit the level the rain fell into during the last sub-step
                region.refresh_rain_mask(temporaries.qr_spl, temporaries.nr_spl)
                region.lower_rain_base()
                self._rain_parameters(
                    temporaries.qr_spl,
                    temporaries.nr_spl,
                    thermo.rhof,
                    temporaries.shape,
                )
                substep_shape = temporaries.shape

            self._rain_flux(
                temporaries.qr_spl,
                temporaries.nr_spl,
                thermo.rhof,
                substep_shape.dvr,
                substep_shape.lbdr,
                substep_shape.mur,
                region.qrmask,
                region.k_level,
                region.qrbase,
                region.qrroof,
                temporaries.sed_qr,
                temporaries.sed_nr,
            )

            if jn == 0:
                self._precipitation_flux(
                    temporaries.sed_qr,
                    thermo.rhof,
                    tendencies.precep,
                )

            self._apply_rain_flux(
                temporaries.qr_spl,
                temporaries.nr_spl,
                temporaries.sed_qr,
                temporaries.sed_nr,
                thermo.rhof,
                thermo.dzf,
                temporaries.qr_tmp,
                temporaries.nr_tmp,
                dt_spl,
            )
            self._copy_rain(
                temporaries.qr_tmp,
                temporaries.nr_tmp,
                temporaries.qr_spl,
                temporaries.nr_spl,
            )

        region.lower_rain_base()

        self._sedimentation_tendency(
            rain.qr,
            rain.nr,
            temporaries.qr_spl,
            temporaries.nr_spl,
            region.k_level,
            region.qrbase,
            region.qrroof,
            tendencies.qrp,
            tendencies.nrp,
            Float(dt),
        )

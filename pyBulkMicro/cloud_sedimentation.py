from gt4py.cartesian.gtscript import PARALLEL, computation, interval

import pyBulkMicro.constants as constants
from ndsl import QuantityFactory, StencilFactory, orchestrate
from ndsl.constants import X_DIM, Y_DIM, Z_DIM
from ndsl.dsl.typing import BoolField, FloatField, FloatFieldK, Int, IntField
from pyBulkMicro.active_region import ActiveRegion
from pyBulkMicro.config import BulkMicroConfig, ConfigConstants
from pyBulkMicro.state import Tendencies, Thermodynamics


def cloud_flux(
    ql0: FloatField,
    rhof: FloatFieldK,
    qcmask: BoolField,
    k_level: IntField,
    qcbase: Int,
    qcroof: Int,
    sedc: FloatField,
):
    from __externals__ import csed, nc_0_m23

    with computation(PARALLEL), interval(...):
        sedc = 0.0
        if qcmask and k_level >= qcbase and k_level <= qcroof:
            sedc = csed * nc_0_m23 * (ql0 * rhof) ** (5.0 / 3.0)


def apply_cloud_flux(
    sedc: FloatField,
    rhof: FloatFieldK,
    exnf: FloatFieldK,
    dzf: FloatFieldK,
    qtpmcr: FloatField,
    thlpmcr: FloatField,
):
    """
    Flux divergence of sedimenting cloud water. Each level loses its own flux
    and gains the flux of the level above. The lowest level loses its flux to
    the surface.
    """
    with computation(PARALLEL), interval(0, -1):
        net = (sedc[0, 0, 1] - sedc) / (dzf * rhof)
        qtpmcr = qtpmcr + net
        thlpmcr = thlpmcr - (constants.RLV / (constants.CP * exnf)) * net
    with computation(PARALLEL), interval(-1, None):
        net = -sedc / (dzf * rhof)
        qtpmcr = qtpmcr + net
        thlpmcr = thlpmcr - (constants.RLV / (constants.CP * exnf)) * net


class CloudSedimentation:
    """
    Sedimentation of cloud droplets assuming a lognormal spectrum with a fixed
    geometric standard deviation and a fixed droplet number.

    Reference: modbulkmicro sedimentation_cloud (Ackerman et al. 2009).
    """

    def __init__(
        self,
        stencil_factory: StencilFactory,
        quantity_factory: QuantityFactory,
        config: BulkMicroConfig,
        config_dependent_constants: ConfigConstants,
    ):
        orchestrate(obj=self, config=stencil_factory.config.dace_config)

        self._sedc = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "kg/m^2/s")

        self._cloud_flux = stencil_factory.from_dims_halo(
            func=cloud_flux,
            compute_dims=[X_DIM, Y_DIM, Z_DIM],
            externals={
                "csed": config_dependent_constants.CSED,
                "nc_0_m23": config_dependent_constants.NC_0_M23,
            },
        )
        self._apply_cloud_flux = stencil_factory.from_dims_halo(
            func=apply_cloud_flux,
            compute_dims=[X_DIM, Y_DIM, Z_DIM],
        )

    def __call__(
        self,
        thermo: Thermodynamics,
        region: ActiveRegion,
        tendencies: Tendencies,
    ):
        if region.cloud_is_empty:
            return

        self._cloud_flux(
            thermo.ql0,
            thermo.rhof,
            region.qcmask,
            region.k_level,
            region.qcbase,
            region.qcroof,
            self._sedc,
        )
        self._apply_cloud_flux(
            self._sedc,
            thermo.rhof,
            thermo.exnf,
            thermo.dzf,
            tendencies.qtpmcr,
            tendencies.thlpmcr,
        )

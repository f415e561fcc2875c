from gt4py.cartesian.gtscript import PARALLEL, computation, interval

import pyBulkMicro.constants as constants
from ndsl import StencilFactory, orchestrate
from ndsl.constants import X_DIM, Y_DIM, Z_DIM
from ndsl.dsl.typing import BoolField, FloatField, FloatFieldK, Int, IntField
from pyBulkMicro.active_region import ActiveRegion
from pyBulkMicro.config import BulkMicroConfig, ConfigConstants
from pyBulkMicro.state import RainState, Tendencies, Thermodynamics


def autoconversion_sb(
    ql0: FloatField,
    qr: FloatField,
    rhof: FloatFieldK,
    exnf: FloatFieldK,
    qcmask: BoolField,
    k_level: IntField,
    qcbase: Int,
    qcroof: Int,
    qrp: FloatField,
    nrp: FloatField,
    qtpmcr: FloatField,
    thlpmcr: FloatField,
):
    """
    Seifert & Beheng (2001) autoconversion with the cloud droplet spectrum
    f(x) ~ x^nu exp(-Bx) and the correction for rain already present.

    Parameters:
    ql0 (3D in): cloud water mixing ratio.
    qr (3D in): rain mixing ratio.
    rhof (1D in): air density.
    exnf (1D in): Exner function.
    qcmask (3D in): cloud activity mask.
    k_level (3D in): vertical index of each cell.
    qcbase, qcroof (in): cloud active range.
    qrp, nrp, qtpmcr, thlpmcr (3D inout): tendencies.
    """
    from __externals__ import k_au, nc_0

    with computation(PARALLEL), interval(...):
        if qcmask and k_level >= qcbase and k_level <= qcroof:
            nuc = 1.58 * (rhof * ql0 * 1000.0) + 0.72 - 1.0
            xc = rhof * ql0 / nc_0
            au = (
                k_au
                * (nuc + 2.0)
                * (nuc + 4.0)
                / (nuc + 1.0) ** 2
                * (ql0 * xc) ** 2
                * constants.RHO_REF
            )

            tau = qr / (ql0 + qr)
            if tau < 1.0:
                phi = constants.K_1 * tau**constants.K_2 * (1.0 - tau**constants.K_2) ** 3
                au = au * (1.0 + phi / (1.0 - tau) ** 2)

            qrp = qrp + au
            nrp = nrp + au / constants.X_S
            qtpmcr = qtpmcr - au
            thlpmcr = thlpmcr + (constants.RLV / (constants.CP * exnf)) * au


def autoconversion_kk(
    ql0: FloatField,
    qr: FloatField,
    rhof: FloatFieldK,
    exnf: FloatFieldK,
    qcmask: BoolField,
    k_level: IntField,
    qcbase: Int,
    qcroof: Int,
    qrp: FloatField,
    nrp: FloatField,
    qtpmcr: FloatField,
    thlpmcr: FloatField,
):
    """Khairoutdinov & Kogan (2000) autoconversion. qr is unused."""
    from __externals__ import nc_0

    with computation(PARALLEL), interval(...):
        if qcmask and k_level >= qcbase and k_level <= qcroof:
            au = 1350.0 * ql0**2.47 * (nc_0 / 1.0e6) ** (-1.79)

            qrp = qrp + au
            nrp = nrp + au * rhof / (constants.PIRHOW * constants.D0_KK**3)
            qtpmcr = qtpmcr - au
            thlpmcr = thlpmcr + (constants.RLV / (constants.CP * exnf)) * au


class Autoconversion:
    """
    Conversion of cloud water into rain water.

    Reference: modbulkmicro autoconversion (Seifert & Beheng 2001,
    Khairoutdinov & Kogan 2000).
    """

    def __init__(
        self,
        stencil_factory: StencilFactory,
        config: BulkMicroConfig,
        config_dependent_constants: ConfigConstants,
    ):
        orchestrate(obj=self, config=stencil_factory.config.dace_config)

        if config.is_sb:
            self._autoconversion = stencil_factory.from_dims_halo(
                func=autoconversion_sb,
                compute_dims=[X_DIM, Y_DIM, Z_DIM],
                externals={
                    "k_au": config_dependent_constants.K_AU,
                    "nc_0": config.NC_0,
                },
            )
        else:
            self._autoconversion = stencil_factory.from_dims_halo(
                func=autoconversion_kk,
                compute_dims=[X_DIM, Y_DIM, Z_DIM],
                externals={
                    "nc_0": config.NC_0,
                },
            )

    def __call__(
        self,
        thermo: Thermodynamics,
        rain: RainState,
        region: ActiveRegion,
        tendencies: Tendencies,
    ):
        if region.cloud_is_empty:
            return

        self._autoconversion(
            thermo.ql0,
            rain.qr,
            thermo.rhof,
            thermo.exnf,
            region.qcmask,
            region.k_level,
            region.qcbase,
            region.qcroof,
            tendencies.qrp,
            tendencies.nrp,
            tendencies.qtpmcr,
            tendencies.thlpmcr,
        )

from gt4py.cartesian.gtscript import PARALLEL, computation, interval, sqrt

import pyBulkMicro.constants as constants
from ndsl import StencilFactory, orchestrate
from ndsl.constants import X_DIM, Y_DIM, Z_DIM
from ndsl.dsl.typing import BoolField, FloatField, FloatFieldK, Int, IntField
from ndsl.logging import ndsl_log
from pyBulkMicro.active_region import ActiveRegion
from pyBulkMicro.config import BulkMicroConfig
from pyBulkMicro.state import RainShape, RainState, Tendencies, Thermodynamics


def accretion_sb(
    ql0: FloatField,
    qr: FloatField,
    rhof: FloatFieldK,
    exnf: FloatFieldK,
    qcmask: BoolField,
    qrmask: BoolField,
    k_level: IntField,
    kbase: Int,
    kroof: Int,
    qrp: FloatField,
    qtpmcr: FloatField,
    thlpmcr: FloatField,
):
    with computation(PARALLEL), interval(...):
        if qrmask and qcmask and k_level >= kbase and k_level <= kroof:
            tau = qr / (ql0 + qr)
            phi = (tau / (tau + constants.K_L)) ** 4
            ac = constants.K_R * rhof * ql0 * qr * phi * sqrt(constants.RHO_REF / rhof)

            qrp = qrp + ac
            qtpmcr = qtpmcr - ac
            thlpmcr = thlpmcr + (constants.RLV / (constants.CP * exnf)) * ac


def accretion_kk(
    ql0: FloatField,
    qr: FloatField,
    rhof: FloatFieldK,
    exnf: FloatFieldK,
    qcmask: BoolField,
    qrmask: BoolField,
    k_level: IntField,
    kbase: Int,
    kroof: Int,
    qrp: FloatField,
    qtpmcr: FloatField,
    thlpmcr: FloatField,
):
    with computation(PARALLEL), interval(...):
        if qrmask and qcmask and k_level >= kbase and k_level <= kroof:
            ac = 67.0 * (ql0 * qr) ** 1.15

            qrp = qrp + ac
            qtpmcr = qtpmcr - ac
            thlpmcr = thlpmcr + (constants.RLV / (constants.CP * exnf)) * ac


def self_collection_breakup(
    qr: FloatField,
    nr: FloatField,
    rhof: FloatFieldK,
    dvr: FloatField,
    lbdr: FloatField,
    qrmask: BoolField,
    k_level: IntField,
    qrbase: Int,
    qrroof: Int,
    nrp: FloatField,
):
    """
    Rain self-collection with the breakup correction of Seifert (2008).

    Parameters:
    qr (3D in): rain mixing ratio.
    nr (3D in): rain number concentration.
    rhof (1D in): air density.
    dvr (3D in): mean volume diameter.
    lbdr (3D in): gamma distribution slope.
    qrmask (3D in): rain activity mask.
    k_level (3D in): vertical index of each cell.
    qrbase, qrroof (in): rain active range.
    nrp (3D inout): rain number tendency.
    """
    with computation(PARALLEL), interval(...):
        if qrmask and k_level >= qrbase and k_level <= qrroof:
            sc = (
                constants.K_RR
                * rhof
                * qr
                * nr
                * (1.0 + constants.KAPPA_R / lbdr * constants.PIRHOW ** (1.0 / 3.0))
                ** (-9.0)
                * sqrt(constants.RHO_REF / rhof)
            )
            br = 0.0
            if dvr > constants.D_BREAKUP:
                br = (constants.K_BR * (dvr - constants.D_EQ) + 1.0) * sc

            nrp = nrp - sc + br


class Accretion:
    """
    Growth of rain by collection of cloud water, and for the Seifert & Beheng
    scheme the change of rain number by self-collection and breakup.

    Reference: modbulkmicro accretion.
    """

    def __init__(
        self,
        stencil_factory: StencilFactory,
        config: BulkMicroConfig,
    ):
        orchestrate(obj=self, config=stencil_factory.config.dace_config)
        self._do_self_collection = config.is_sb

        self._accretion = stencil_factory.from_dims_halo(
            func=accretion_sb if config.is_sb else accretion_kk,
            compute_dims=[X_DIM, Y_DIM, Z_DIM],
        )
        if self._do_self_collection:
            self._self_collection_breakup = stencil_factory.from_dims_halo(
                func=self_collection_breakup,
                compute_dims=[X_DIM, Y_DIM, Z_DIM],
            )

    def __call__(
        self,
        thermo: Thermodynamics,
        rain: RainState,
        shape: RainShape,
        region: ActiveRegion,
        tendencies: Tendencies,
    ):
        kbase, kroof = region.overlap
        if kbase <= kroof:
            self._accretion(
                thermo.ql0,
                rain.qr,
                thermo.rhof,
                thermo.exnf,
                region.qcmask,
                region.qrmask,
                region.k_level,
                kbase,
                kroof,
                tendencies.qrp,
                tendencies.qtpmcr,
                tendencies.thlpmcr,
            )
        else:
            ndsl_log.debug("Accretion skipped: cloud and rain do not overlap")

        if self._do_self_collection and not region.rain_is_empty:
            self._self_collection_breakup(
                rain.qr,
                rain.nr,
                thermo.rhof,
                shape.dvr,
                shape.lbdr,
                region.qrmask,
                region.k_level,
                region.qrbase,
                region.qrroof,
                tendencies.nrp,
            )

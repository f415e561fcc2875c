from gt4py.cartesian.gtscript import PARALLEL, computation, interval

import pyBulkMicro.constants as constants
from ndsl.dsl.typing import BoolField, Float, FloatField, FloatFieldK, Int, IntField
from pyBulkMicro.flux_integrals import liq_cont, sed_flux


def copy_rain(
    qr_in: FloatField,
    nr_in: FloatField,
    qr_out: FloatField,
    nr_out: FloatField,
):
    with computation(PARALLEL), interval(...):
        qr_out = qr_in
        nr_out = nr_in


def rain_flux_lognormal(
    qr_spl: FloatField,
    nr_spl: FloatField,
    rhof: FloatFieldK,
    dvr: FloatField,
    lbdr: FloatField,
    mur: FloatField,
    qrmask: BoolField,
    k_level: IntField,
    qrbase: Int,
    qrroof: Int,
    sed_qr: FloatField,
    sed_nr: FloatField,
):
    """
    Rain flux from the analytic integral over a lognormal distribution.
    The mass flux is rescaled so that the implied fall velocity applies to
    the actual rain content. lbdr and mur are unused.
    """
    from __externals__ import dgr_factor, sig2_gr

    with computation(PARALLEL), interval(...):
        sed_qr = 0.0
        sed_nr = 0.0
        if qrmask and k_level >= qrbase and k_level <= qrroof:
            # correction for width of DSD
            dgr = dgr_factor * dvr
            sed_qr = sed_flux(nr_spl, dgr, sig2_gr, constants.D_S, 3.0)
            sed_nr = sed_flux(nr_spl, dgr, sig2_gr, constants.D_S, 0.0) / constants.PIRHOW

            pwcont = liq_cont(nr_spl, dgr, sig2_gr, constants.D_S, 3.0)
            if pwcont > constants.EPS1:
                sed_qr = (qr_spl * rhof / pwcont) * sed_qr


def rain_flux_gamma(
    qr_spl: FloatField,
    nr_spl: FloatField,
    rhof: FloatFieldK,
    dvr: FloatField,
    lbdr: FloatField,
    mur: FloatField,
    qrmask: BoolField,
    k_level: IntField,
    qrbase: Int,
    qrroof: Int,
    sed_qr: FloatField,
    sed_nr: FloatField,
):
    """Rain flux with the terminal velocity of Stevens & Seifert (2008). dvr is unused."""
    from __externals__ import a_tvsb, b_tvsb, c_tvsb

    with computation(PARALLEL), interval(...):
        sed_qr = 0.0
        sed_nr = 0.0
        if qrmask and k_level >= qrbase and k_level <= qrroof:
            wfall_qr = max(0.0, a_tvsb - b_tvsb * (1.0 + c_tvsb / lbdr) ** (-(mur + 4.0)))
            wfall_nr = max(0.0, a_tvsb - b_tvsb * (1.0 + c_tvsb / lbdr) ** (-(mur + 1.0)))
            sed_qr = wfall_qr * qr_spl * rhof
            sed_nr = wfall_nr * nr_spl


def rain_flux_kk(
    qr_spl: FloatField,
    nr_spl: FloatField,
    rhof: FloatFieldK,
    dvr: FloatField,
    lbdr: FloatField,
    mur: FloatField,
    qrmask: BoolField,
    k_level: IntField,
    qrbase: Int,
    qrroof: Int,
    sed_qr: FloatField,
    sed_nr: FloatField,
):
    """Rain flux with fall speeds linear in mean diameter. lbdr and mur are unused."""
    with computation(PARALLEL), interval(...):
        sed_qr = 0.0
        sed_nr = 0.0
        if qrmask and k_level >= qrbase and k_level <= qrroof:
            wfall_qr = max(0.0, constants.KK_VQ_SLOPE * dvr - constants.KK_VQ_OFFSET)
            wfall_nr = max(0.0, constants.KK_VN_SLOPE * dvr - constants.KK_VN_OFFSET)
            sed_qr = wfall_qr * qr_spl * rhof
            sed_nr = wfall_nr * nr_spl


def precipitation_flux(
    sed_qr: FloatField,
    rhof: FloatFieldK,
    precep: FloatField,
):
    with computation(PARALLEL), interval(...):
        precep = sed_qr / rhof


def apply_rain_flux(
    qr_spl: FloatField,
    nr_spl: FloatField,
    sed_qr: FloatField,
    sed_nr: FloatField,
    rhof: FloatFieldK,
    dzf: FloatFieldK,
    qr_tmp: FloatField,
    nr_tmp: FloatField,
    dt_spl: Float,
):
    """
    Advance the working rain fields by one sub-step from the flux buffers.
    Reads the snapshot *_spl and writes *_tmp, so every level sees the fluxes
    of the same sub-step. Nothing falls into the top level.
    """
    with computation(PARALLEL), interval(0, -1):
        qr_tmp = qr_spl + (sed_qr[0, 0, 1] - sed_qr) * dt_spl / (dzf * rhof)
        nr_tmp = nr_spl + (sed_nr[0, 0, 1] - sed_nr) * dt_spl / dzf
    with computation(PARALLEL), interval(-1, None):
        qr_tmp = qr_spl - sed_qr * dt_spl / (dzf * rhof)
        nr_tmp = nr_spl - sed_nr * dt_spl / dzf


def sedimentation_tendency(
    qr: FloatField,
    nr: FloatField,
    qr_spl: FloatField,
    nr_spl: FloatField,
    k_level: IntField,
    qrbase: Int,
    qrroof: Int,
    qrp: FloatField,
    nrp: FloatField,
    dt: Float,
):
    with computation(PARALLEL), interval(...):
        if k_level >= qrbase and k_level <= qrroof:
            qrp = qrp + (qr_spl - qr) / dt
            nrp = nrp + (nr_spl - nr) / dt

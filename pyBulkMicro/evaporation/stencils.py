import gt4py.cartesian.gtscript as gtscript
from gt4py.cartesian.gtscript import PARALLEL, computation, interval

import pyBulkMicro.constants as constants
from ndsl.dsl.typing import BoolField, Float, FloatField, FloatFieldK, Int, IntField


@gtscript.function
def subsaturation_growth(
    qt0: Float,
    ql0: Float,
    qvsl: Float,
    tmp0: Float,
    esl: Float,
) -> Float:
    """
    Product of the subsaturation S <= 0 and the diffusional growth factor G.
    Supersaturated air gives zero.
    """
    s = min(0.0, (qt0 - ql0) / qvsl - 1.0)
    g = (constants.RV * tmp0) / (constants.DV * esl) + constants.RLV / (
        constants.KT * tmp0
    ) * (constants.RLV / (constants.RV * tmp0) - 1.0)
    return s / g


def evaporation_sb(
    qr: FloatField,
    nr: FloatField,
    qt0: FloatField,
    ql0: FloatField,
    qvsl: FloatField,
    tmp0: FloatField,
    esl: FloatField,
    rhof: FloatFieldK,
    exnf: FloatFieldK,
    dvr: FloatField,
    lbdr: FloatField,
    mur: FloatField,
    xr: FloatField,
    gamma21: FloatField,
    gamma251: FloatField,
    qrmask: BoolField,
    k_level: IntField,
    qrbase: Int,
    qrroof: Int,
    qrp: FloatField,
    nrp: FloatField,
    qtpmcr: FloatField,
    thlpmcr: FloatField,
    dt: Float,
):
    """
    Evaporation of rain with the ventilation factor of Seifert (2008).

    Parameters:
    qr, nr (3D in): rain mass and number at the start of the step. Together with
        qrp and nrp they bound what can evaporate in dt.
    qt0, ql0 (3D in): total and cloud water.
    qvsl, esl (3D in): saturation humidity and vapour pressure over liquid.
    tmp0 (3D in): temperature.
    rhof, exnf (1D in): air density and Exner function.
    dvr, lbdr, mur, xr (3D in): rain distribution parameters.
    gamma21, gamma251 (3D in): ventilation gamma ratios looked up from mur.
    qrmask (3D in): rain activity mask.
    k_level (3D in): vertical index of each cell.
    qrbase, qrroof (in): rain active range.
    qrp, nrp, qtpmcr, thlpmcr (3D inout): tendencies.
    dt (in): model time step.
    """
    from __externals__ import b_over_a, c_tvsb, vent_coef

    with computation(PARALLEL), interval(...):
        if qrmask and k_level >= qrbase and k_level <= qrroof:
            mu25 = mur + 2.5
            series = (
                1.0
                - 0.5 * b_over_a * (lbdr / (c_tvsb + lbdr)) ** mu25
                - 0.125 * b_over_a**2 * (lbdr / (2.0 * c_tvsb + lbdr)) ** mu25
                - 0.0625 * b_over_a**3 * (lbdr / (3.0 * c_tvsb + lbdr)) ** mu25
                - (5.0 / 128.0) * b_over_a**4 * (lbdr / (4.0 * c_tvsb + lbdr)) ** mu25
            )
            f_vent = (
                constants.AVF * gamma21 * dvr
                + vent_coef * gamma251 * dvr**1.5 * series
            )

            evap = (
                2.0
                * constants.PI
                * nr
                * subsaturation_growth(qt0, ql0, qvsl, tmp0, esl)
                * f_vent
                / rhof
            )
            nevap = constants.C_NEVAP * evap * rhof / xr

            # rain left after the processes already accumulated in qrp and nrp
            qr_avail = max(qr + dt * qrp, 0.0)
            nr_avail = max(nr + dt * nrp, 0.0)
            if evap < -qr_avail / dt:
                nevap = -nr_avail / dt
                evap = -qr_avail / dt
            if nevap < -nr_avail / dt:
                nevap = -nr_avail / dt

            qrp = qrp + evap
            nrp = nrp + nevap
            qtpmcr = qtpmcr - evap
            thlpmcr = thlpmcr + (constants.RLV / (constants.CP * exnf)) * evap


def evaporation_kk(
    qr: FloatField,
    nr: FloatField,
    qt0: FloatField,
    ql0: FloatField,
    qvsl: FloatField,
    tmp0: FloatField,
    esl: FloatField,
    rhof: FloatFieldK,
    exnf: FloatFieldK,
    dvr: FloatField,
    lbdr: FloatField,
    mur: FloatField,
    xr: FloatField,
    gamma21: FloatField,
    gamma251: FloatField,
    qrmask: BoolField,
    k_level: IntField,
    qrbase: Int,
    qrroof: Int,
    qrp: FloatField,
    nrp: FloatField,
    qtpmcr: FloatField,
    thlpmcr: FloatField,
    dt: Float,
):
    """Khairoutdinov & Kogan (2000) evaporation. Shape and ventilation inputs are unused."""
    with computation(PARALLEL), interval(...):
        if qrmask and k_level >= qrbase and k_level <= qrroof:
            evap = (
                constants.C_EVAPKK
                * 2.0
                * constants.PI
                * dvr
                * subsaturation_growth(qt0, ql0, qvsl, tmp0, esl)
                * nr
                / rhof
            )
            nevap = evap * rhof / xr

            # rain left after the processes already accumulated in qrp and nrp
            qr_avail = max(qr + dt * qrp, 0.0)
            nr_avail = max(nr + dt * nrp, 0.0)
            if evap < -qr_avail / dt:
                nevap = -nr_avail / dt
                evap = -qr_avail / dt
            if nevap < -nr_avail / dt:
                nevap = -nr_avail / dt

            qrp = qrp + evap
            nrp = nrp + nevap
            qtpmcr = qtpmcr - evap
            thlpmcr = thlpmcr + (constants.RLV / (constants.CP * exnf)) * evap

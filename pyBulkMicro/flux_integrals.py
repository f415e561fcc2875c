"""
Closed-form moments of a lognormal drop size distribution.

Integrals follow Feingold et al. (1986) eq. 17-20, with fall velocity
alfa * D^beta piecewise in diameter after Rogers & Yau (1989), in SI units.
"""

import gt4py.cartesian.gtscript as gtscript
from gt4py.cartesian.gtscript import exp, log, sqrt

import pyBulkMicro.constants as constants
from ndsl.dsl.typing import Float


@gtscript.function
def erf_poly(y: Float) -> Float:
    """
    Error function approximated by the polynomial 7.1.27 of
    Abramowitz and Stegun, |error| <= 5e-4.

    Parameters:
    y (Float in): argument.

    Returns:
    Float: erf(y).
    """
    ay = abs(y)
    poly = (
        1.0
        + constants.ERF_A1 * ay
        + constants.ERF_A2 * ay**2
        + constants.ERF_A3 * ay**3
        + constants.ERF_A4 * ay**4
    )
    erf = 1.0 - 1.0 / poly**4
    if y < 0.0:
        erf = -erf
    return erf


@gtscript.function
def erfint(
    beta: Float,
    d: Float,
    d_min: Float,
    d_max: Float,
    sig2: Float,
    nnn: Float,
) -> Float:
    """
    Integral of D^(beta + nnn) weighted by a lognormal distribution
    between d_min and d_max.

    Parameters:
    beta (Float in): power of the fall speed law.
    d (Float in): geometric mean diameter of the distribution.
    d_min (Float in): lower integration limit.
    d_max (Float in): upper integration limit.
    sig2 (Float in): squared log of the geometric standard deviation.
    nnn (Float in): moment of the distribution.

    Returns:
    Float: the integral, zero for empty or inverted bounds.
    """
    d_inv = 1.0 / (constants.ERFINT_EPS + d)
    nn = beta + nnn

    ymin = constants.SQRT_HALF * (log(d_min * d_inv) - nn * sig2) / sqrt(sig2)
    ymax = constants.SQRT_HALF * (log(d_max * d_inv) - nn * sig2) / sqrt(sig2)

    integral = d**nn * exp(0.5 * nn**2 * sig2) * 0.5 * (erf_poly(ymax) - erf_poly(ymin))
    return max(0.0, integral)


@gtscript.function
def sed_flux(
    n_in: Float,
    d_in: Float,
    sig2: Float,
    ddiv: Float,
    nnn: Float,
) -> Float:
    """
    Sedimentation flux [kg/m2/s for nnn=3] of drops larger than ddiv.

    The fall speed law is quadratic below 133 um, linear up to 1.25 mm and
    square root above. Each regime contributes over its intersection with
    [ddiv, 4.3 mm], whatever d_in is. For d_in below ddiv only the tail of the
    spectrum above ddiv falls, so the flux drops steeply as d_in shrinks and
    the droplet range [1 um, ddiv] never contributes. At d_in = 0.5 ddiv and
    sig2 = ln(1.5)^2 it is about 3 % of the flux at d_in = ddiv.

    Parameters:
    n_in (Float in): number concentration.
    d_in (Float in): geometric mean diameter.
    sig2 (Float in): squared log of the geometric standard deviation.
    ddiv (Float in): diameter separating droplets from drops.
    nnn (Float in): moment of the distribution.
    """
    lower_quad = max(constants.SED_D_INTMIN, ddiv)
    lower_lin = max(constants.D_QUAD_LIN, ddiv)
    lower_sqrt = max(constants.D_LIN_SQRT, ddiv)

    flux = (
        constants.PIRHOW
        * n_in
        * constants.ALFA_QUAD
        * erfint(2.0, d_in, lower_quad, constants.D_QUAD_LIN, sig2, nnn)
    )
    flux = flux + (
        constants.PIRHOW
        * n_in
        * constants.ALFA_LIN
        * erfint(1.0, d_in, lower_lin, constants.D_LIN_SQRT, sig2, nnn)
    )
    flux = flux + (
        constants.PIRHOW
        * n_in
        * constants.ALFA_SQRT
        * erfint(0.5, d_in, lower_sqrt, constants.SED_D_INTMAX, sig2, nnn)
    )
    return flux


@gtscript.function
def liq_cont(
    n_in: Float,
    d_in: Float,
    sig2: Float,
    ddiv: Float,
    nnn: Float,
) -> Float:
    """
    Liquid water content [kg/m3 for nnn=3] of drops between ddiv and 3 mm.
    Like sed_flux, only the tail above ddiv counts when d_in is below ddiv.
    """
    return (
        constants.PIRHOW
        * n_in
        * erfint(0.0, d_in, ddiv, constants.LIQ_D_INTMAX, sig2, nnn)
    )

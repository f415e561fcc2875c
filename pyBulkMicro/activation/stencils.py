from gt4py.cartesian.gtscript import PARALLEL, computation, exp, interval, log

import pyBulkMicro.constants as constants
from ndsl.dsl.typing import Float, FloatField, FloatFieldK
from pyBulkMicro.flux_integrals import erf_poly


def reset_mode_volume(volume: FloatField, kappa_volume: FloatField):
    with computation(PARALLEL), interval(...):
        volume = 0.0
        kappa_volume = 0.0


def accumulate_species(
    conc: FloatField,
    volume: FloatField,
    kappa_volume: FloatField,
    rho_s: Float,
    kappa_s: Float,
):
    """Add the dry volume of one species, and its hygroscopicity weighted by volume."""
    with computation(PARALLEL), interval(...):
        species_volume = max(conc, 0.0) / rho_s
        volume = volume + species_volume
        kappa_volume = kappa_volume + kappa_s * species_volume


def activated_fractions(
    thl0: FloatField,
    ql0: FloatField,
    exnf: FloatFieldK,
    number: FloatField,
    volume: FloatField,
    kappa_volume: FloatField,
    fn: FloatField,
    fm: FloatField,
    sigma_g: Float,
):
    """
    Number and mass fractions of a lognormal mode activated at the
    prescribed supersaturation, from Koehler theory with kappa
    hygroscopicity (Petters & Kreidenweis 2007).

    Parameters:
    thl0 (3D in): liquid water potential temperature.
    ql0 (3D in): cloud water.
    exnf (1D in): Exner function.
    number (3D in): mode number concentration.
    volume (3D in): mode dry volume, summed over species.
    kappa_volume (3D in): volume weighted sum of species hygroscopicity.
    fn (3D out): activated number fraction.
    fm (3D out): activated mass fraction.
    sigma_g (in): geometric standard deviation of the mode.
    """
    from __externals__ import ssat

    with computation(PARALLEL), interval(...):
        fn = 0.0
        fm = 0.0
        if number > 0.0 and volume > 0.0 and kappa_volume > 0.0:
            kappa = kappa_volume / volume
            temperature = thl0 * exnf + (constants.RLV / constants.CP) * ql0

            # Kelvin term and critical dry diameter
            a_kelvin = (
                4.0 * constants.SW * constants.MW / (constants.R_GAS * temperature * constants.RHOW)
            )
            d_crit = (
                4.0 * a_kelvin**3 / (27.0 * kappa * log(1.0 + 0.01 * ssat) ** 2)
            ) ** (1.0 / 3.0)

            ln_sigma = log(sigma_g)
            d_vol = (6.0 * volume / (constants.PI * number)) ** (1.0 / 3.0)
            d_num = d_vol * exp(-1.5 * ln_sigma**2)
            d_mass = d_num * exp(3.0 * ln_sigma**2)

            fn = 0.5 * (1.0 - erf_poly(log(d_crit / d_num) / (constants.SQRT2 * ln_sigma)))
            fm = 0.5 * (1.0 - erf_poly(log(d_crit / d_mass) / (constants.SQRT2 * ln_sigma)))


def activate(
    conc: FloatField,
    fraction: FloatField,
    source_tend: FloatField,
    source_acti: FloatField,
    cloud_tend: FloatField,
    cloud_acti: FloatField,
    dt: Float,
):
    """Move the activated part of one tracer from its mode to the in-cloud mode."""
    with computation(PARALLEL), interval(...):
        acti = -fraction * conc / dt
        source_acti = acti
        source_tend = source_tend + acti
        cloud_acti = cloud_acti - acti
        cloud_tend = cloud_tend - acti

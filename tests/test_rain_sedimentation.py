import numpy as np
import pytest
from gt4py.cartesian.gtscript import PARALLEL, computation, interval

import pyBulkMicro.constants as constants
from ndsl.constants import X_DIM, Y_DIM, Z_DIM
from ndsl.dsl.typing import Float, FloatField
from pyBulkMicro.config import BulkMicroConfig, ConfigConstants, MicrophysicsScheme
from pyBulkMicro.flux_integrals import liq_cont, sed_flux
from pyBulkMicro.rain_parameters import RainParameters
from pyBulkMicro.rain_sedimentation import RainSedimentation, number_of_substeps


SCHEMES = [
    BulkMicroConfig(),
    BulkMicroConfig(L_LOGNORMAL=True),
    BulkMicroConfig(SCHEME=MicrophysicsScheme.KK2000),
]


def column_integral(field, thermo):
    return np.sum(field.view[:] * thermo.rhof.view[:] * thermo.dzf.view[:], axis=2)


def run_sedimentation(stencil_factory, quantity_factory, config, state, region, dt):
    thermo, rain, shape, tendencies = state
    region.update_cloud(thermo.ql0)
    region.update_rain(rain.qr, rain.nr)
    rain_parameters = RainParameters(stencil_factory, config)
    rain_parameters(rain.qr, rain.nr, thermo.rhof, shape)
    sedimentation = RainSedimentation(
        stencil_factory,
        quantity_factory,
        config,
        ConfigConstants.make(config),
        rain_parameters,
    )
    sedimentation(thermo, rain, shape, region, tendencies, dt)


def test_number_of_substeps():
    assert number_of_substeps(9.9, 10.0, 100.0) == 1
    assert number_of_substeps(9.9, 20.0, 50.0) == 4
    assert number_of_substeps(9.9, 1.0e-3, 100.0) == 1


@pytest.mark.parametrize("config", SCHEMES)
def test_elevated_rain_conserves_mass(stencil_factory, quantity_factory, state, region, config):
    thermo, rain, _, tendencies = state
    rain.qr.view[:, :, 5] = 1.0e-4
    rain.nr.view[:, :, 5] = 1.0e5

    run_sedimentation(stencil_factory, quantity_factory, config, state, region, 10.0)

    qrp = tendencies.qrp.view[:]
    assert np.all(qrp[:, :, 5] < 0.0)
    assert np.all(qrp[:, :, 4] > 0.0)
    np.testing.assert_array_equal(qrp[:, :, 6:], 0.0)
    np.testing.assert_array_equal(qrp[:, :, :4], 0.0)
    np.testing.assert_allclose(
        column_integral(tendencies.qrp, thermo), 0.0, atol=1e-12 * np.abs(qrp).max()
    )
    # nothing reaches the surface
    np.testing.assert_array_equal(tendencies.precep.view[:, :, 0], 0.0)
    assert np.all(tendencies.precep.view[:, :, 5] > 0.0)
    assert region.qrbase == 4


def test_substeps_lower_the_rain_base(stencil_factory, quantity_factory, state, region, config):
    thermo, rain, _, tendencies = state
    rain.qr.view[:, :, 5] = 1.0e-4
    rain.nr.view[:, :, 5] = 1.0e5
    dt = 40.0
    assert number_of_substeps(config.WFALLMAX, dt, 100.0) == 4

    run_sedimentation(stencil_factory, quantity_factory, config, state, region, dt)

    assert region.qrbase == 1
    assert region.qrroof == 5
    qrp = tendencies.qrp.view[:]
    assert np.all(qrp[:, :, 5] < 0.0)
    np.testing.assert_array_equal(qrp[:, :, 0], 0.0)
    np.testing.assert_allclose(
        column_integral(tendencies.qrp, thermo), 0.0, atol=1e-12 * np.abs(qrp).max()
    )


def test_surface_loss_is_the_precipitation(stencil_factory, quantity_factory, state, region, config):
    thermo, rain, _, tendencies = state
    rain.qr.view[:, :, :3] = 1.0e-4
    rain.nr.view[:, :, :3] = 1.0e5

    run_sedimentation(stencil_factory, quantity_factory, config, state, region, 10.0)

    precep = tendencies.precep.view[:]
    assert np.all(precep[:, :, 0] > 0.0)
    np.testing.assert_allclose(
        column_integral(tendencies.qrp, thermo),
        -precep[:, :, 0] * thermo.rhof.view[0],
        rtol=1e-10,
    )


def test_zero_fall_speed(stencil_factory, quantity_factory, state, region):
    config = BulkMicroConfig(A_TVSB=0.0)
    _, rain, _, tendencies = state
    rain.qr.view[:] = 1.0e-4
    rain.nr.view[:] = 1.0e5

    run_sedimentation(stencil_factory, quantity_factory, config, state, region, 10.0)

    np.testing.assert_array_equal(tendencies.qrp.view[:], 0.0)
    np.testing.assert_array_equal(tendencies.nrp.view[:], 0.0)
    np.testing.assert_array_equal(tendencies.precep.view[:], 0.0)


def test_no_rain_is_a_no_op(stencil_factory, quantity_factory, state, region, config):
    _, _, _, tendencies = state
    tendencies.qrp.view[:] = 1.0
    tendencies.precep.view[:] = 1.0

    run_sedimentation(stencil_factory, quantity_factory, config, state, region, 10.0)

    assert region.rain_is_empty
    np.testing.assert_array_equal(tendencies.qrp.view[:], 1.0)
    np.testing.assert_array_equal(tendencies.nrp.view[:], 0.0)
    np.testing.assert_array_equal(tendencies.precep.view[:], 0.0)


def lognormal_moments(
    nr: FloatField,
    dvr: FloatField,
    mass_flux: FloatField,
    water_content: FloatField,
    dgr_factor: Float,
    sig2: Float,
):
    with computation(PARALLEL), interval(...):
        mass_flux = sed_flux(nr, dgr_factor * dvr, sig2, constants.D_S, 3.0)
        water_content = liq_cont(nr, dgr_factor * dvr, sig2, constants.D_S, 3.0)


def test_lognormal_flux_without_drop_content(stencil_factory, quantity_factory, state, region):
    """
    Sparse drizzle centred below the separating diameter holds almost no water
    above it, so the flux is not rescaled to the rain content.
    """
    config = BulkMicroConfig(L_LOGNORMAL=True)
    derived = ConfigConstants.make(config)
    thermo, rain, shape, tendencies = state
    rain.qr.view[:, :, 5] = 1.0e-12
    rain.nr.view[:, :, 5] = 1.0e-2

    run_sedimentation(stencil_factory, quantity_factory, config, state, region, 10.0)

    # the mean drop mass is clipped to the separating mass
    np.testing.assert_allclose(shape.dvr.view[:, :, 5], constants.D_S, rtol=1e-12)
    mass_flux = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "kg/m^2/s")
    water_content = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "kg/m^3")
    stencil_factory.from_dims_halo(
        func=lognormal_moments, compute_dims=[X_DIM, Y_DIM, Z_DIM]
    )(rain.nr, shape.dvr, mass_flux, water_content, derived.DGR_FACTOR, derived.SIG2_GR)
    assert np.all(water_content.view[:, :, 5] <= constants.EPS1)
    assert np.all(mass_flux.view[:, :, 5] > 0.0)

    # rhof is one, so the precipitation flux is the unscaled mass flux
    np.testing.assert_allclose(
        tendencies.precep.view[:, :, 5], mass_flux.view[:, :, 5], rtol=1e-12
    )
    scaled = 1.0e-12 / water_content.view[:, :, 5] * mass_flux.view[:, :, 5]
    assert np.all(np.abs(scaled - mass_flux.view[:, :, 5]) > 1.0e-3 * mass_flux.view[:, :, 5])
    np.testing.assert_allclose(
        column_integral(tendencies.qrp, thermo), 0.0, atol=1e-12 * np.abs(tendencies.qrp.view[:]).max()
    )

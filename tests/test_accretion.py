import numpy as np
import pytest

import pyBulkMicro.constants as constants
from pyBulkMicro.accretion import Accretion
from pyBulkMicro.config import BulkMicroConfig, MicrophysicsScheme
from pyBulkMicro.rain_parameters import RainParameters


@pytest.mark.parametrize("scheme", list(MicrophysicsScheme))
def test_accretion_conserves_water(stencil_factory, state, region, scheme):
    config = BulkMicroConfig(SCHEME=scheme)
    thermo, rain, shape, tendencies = state
    thermo.ql0.view[:, :, 3:8] = 1.0e-3
    rain.qr.view[:, :, 1:6] = 1.0e-4
    rain.nr.view[:, :, 1:6] = 1.0e5
    region.update_cloud(thermo.ql0)
    region.update_rain(rain.qr, rain.nr)
    RainParameters(stencil_factory, config)(rain.qr, rain.nr, thermo.rhof, shape)

    Accretion(stencil_factory, config)(thermo, rain, shape, region, tendencies)

    qrp = tendencies.qrp.view[:]
    # only where cloud and rain overlap
    assert np.all(qrp[:, :, 3:6] > 0.0)
    np.testing.assert_array_equal(qrp[:, :, :3], 0.0)
    np.testing.assert_array_equal(qrp[:, :, 6:], 0.0)
    np.testing.assert_array_equal(qrp, -tendencies.qtpmcr.view[:])
    np.testing.assert_allclose(
        tendencies.thlpmcr.view[:], constants.RLV / constants.CP * qrp, rtol=1e-12
    )


def test_no_overlap_skips_accretion(stencil_factory, state, region):
    config = BulkMicroConfig(SCHEME=MicrophysicsScheme.KK2000)
    thermo, rain, shape, tendencies = state
    thermo.ql0.view[:, :, 6:] = 1.0e-3
    rain.qr.view[:, :, :3] = 1.0e-4
    rain.nr.view[:, :, :3] = 1.0e5
    region.update_cloud(thermo.ql0)
    region.update_rain(rain.qr, rain.nr)
    kbase, kroof = region.overlap
    assert kbase > kroof

    Accretion(stencil_factory, config)(thermo, rain, shape, region, tendencies)

    np.testing.assert_array_equal(tendencies.qrp.view[:], 0.0)
    np.testing.assert_array_equal(tendencies.qtpmcr.view[:], 0.0)


def test_self_collection_without_breakup_removes_drops(stencil_factory, state, region, config):
    thermo, rain, shape, tendencies = state
    rain.qr.view[:] = 1.0e-4
    rain.nr.view[:] = 1.0e5
    region.update_cloud(thermo.ql0)
    region.update_rain(rain.qr, rain.nr)
    RainParameters(stencil_factory, config)(rain.qr, rain.nr, thermo.rhof, shape)
    assert np.all(shape.dvr.view[:] < constants.D_BREAKUP)

    Accretion(stencil_factory, config)(thermo, rain, shape, region, tendencies)

    assert np.all(tendencies.nrp.view[:] < 0.0)
    # no cloud, so no mass exchange
    np.testing.assert_array_equal(tendencies.qrp.view[:], 0.0)


def test_breakup_grows_with_diameter(stencil_factory, state, region, config):
    thermo, rain, shape, tendencies = state
    rain.qr.view[:] = 1.0e-3
    rain.nr.view[:] = 1.0e3
    region.update_cloud(thermo.ql0)
    region.update_rain(rain.qr, rain.nr)
    nz = shape.dvr.view[:].shape[2]
    shape.dvr.view[:] = np.linspace(0.4e-3, 2.0e-3, nz)[np.newaxis, np.newaxis, :]
    shape.lbdr.view[:] = 4.0e3

    Accretion(stencil_factory, config)(thermo, rain, shape, region, tendencies)

    nrp = tendencies.nrp.view[0, 0, :]
    assert np.all(np.diff(nrp) > 0.0)
    # breakup dominates above the equilibrium diameter
    assert np.all(nrp[shape.dvr.view[0, 0, :] > constants.D_EQ] > 0.0)


def test_kk_has_no_self_collection(stencil_factory, state, region):
    config = BulkMicroConfig(SCHEME=MicrophysicsScheme.KK2000)
    thermo, rain, shape, tendencies = state
    rain.qr.view[:] = 1.0e-4
    rain.nr.view[:] = 1.0e5
    region.update_cloud(thermo.ql0)
    region.update_rain(rain.qr, rain.nr)
    RainParameters(stencil_factory, config)(rain.qr, rain.nr, thermo.rhof, shape)

    Accretion(stencil_factory, config)(thermo, rain, shape, region, tendencies)

    np.testing.assert_array_equal(tendencies.nrp.view[:], 0.0)

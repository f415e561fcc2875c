import numpy as np

from pyBulkMicro.active_region import column_bounds


def test_empty_region(state, region):
    thermo, rain, _, _ = state
    region.update_cloud(thermo.ql0)
    region.update_rain(rain.qr, rain.nr)

    assert region.cloud_is_empty
    assert region.rain_is_empty
    assert (region.qcbase, region.qcroof) == (region.nz, -1)
    assert (region.qrbase, region.qrroof) == (region.nz, -1)
    kbase, kroof = region.overlap
    assert kbase > kroof


def test_bounds_cover_every_column(state, region):
    thermo, rain, _, _ = state
    thermo.ql0.view[0, 0, 3] = 1.0e-4
    thermo.ql0.view[1, 1, 6] = 1.0e-4
    # below the activity threshold
    thermo.ql0.view[1, 0, 8] = 1.0e-9
    rain.qr.view[0, 1, 1:5] = 1.0e-5
    rain.nr.view[0, 1, 1:5] = 1.0e3

    region.update_cloud(thermo.ql0)
    region.update_rain(rain.qr, rain.nr)

    assert (region.qcbase, region.qcroof) == (3, 6)
    assert (region.qrbase, region.qrroof) == (1, 4)
    assert region.overlap == (3, 4)
    assert region.qcmask.view[0, 0, 3]
    assert not region.qcmask.view[1, 0, 8]
    assert np.count_nonzero(region.qrmask.view[:]) == 4


def test_rain_needs_number(state, region):
    _, rain, _, _ = state
    rain.qr.view[:] = 1.0e-5

    region.update_rain(rain.qr, rain.nr)

    assert region.rain_is_empty


def test_lower_rain_base_stops_at_the_surface(state, region):
    _, rain, _, _ = state
    rain.qr.view[:, :, 1] = 1.0e-5
    rain.nr.view[:, :, 1] = 1.0e3
    region.update_rain(rain.qr, rain.nr)

    region.lower_rain_base()
    assert region.qrbase == 0
    region.lower_rain_base()
    assert region.qrbase == 0
    assert region.qrroof == 1


def test_level_index(region):
    np.testing.assert_array_equal(region.k_level.view[0, 0, :], np.arange(region.nz))
    np.testing.assert_array_equal(region.k_level.view[1, 1, :], np.arange(region.nz))


def test_column_bounds_of_empty_mask(quantity_factory):
    from ndsl.constants import X_DIM, Y_DIM, Z_DIM

    mask = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "n/a", dtype=bool)
    assert column_bounds(mask) == (mask.view[:].shape[2], -1)
    mask.view[1, 0, 7] = True
    assert column_bounds(mask) == (7, 7)

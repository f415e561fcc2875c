import numpy as np
import pytest

import pyBulkMicro.constants as constants
from pyBulkMicro.config import BulkMicroConfig, ConfigConstants, MicrophysicsScheme


def test_defaults():
    config = BulkMicroConfig()
    assert config.SCHEME == MicrophysicsScheme.SB2006
    assert config.is_sb
    assert not config.L_LOGNORMAL


def test_scheme_from_string():
    config = BulkMicroConfig(SCHEME="khairoutdinov_kogan")
    assert config.SCHEME == MicrophysicsScheme.KK2000
    assert not config.is_sb


def test_unknown_scheme():
    with pytest.raises(ValueError):
        BulkMicroConfig(SCHEME="morrison")


def test_lognormal_needs_sb():
    with pytest.raises(NotImplementedError):
        BulkMicroConfig(SCHEME=MicrophysicsScheme.KK2000, L_LOGNORMAL=True)


@pytest.mark.parametrize(
    "overrides",
    [
        {"NC_0": 0.0},
        {"QCMIN": -1.0e-7},
        {"QRMIN": 0.0},
        {"WFALLMAX": 0.0},
        {"SSAT": -0.1},
        {"SIG_G": 1.0},
        {"SIG_GR": 0.5},
        {"A_TVSB": -1.0},
        {"C_TVSB": 0.0},
        {"L_MUR_CST": True, "MUR_CST": -1.0},
    ],
)
def test_non_physical_values(overrides):
    with pytest.raises(ValueError):
        BulkMicroConfig(**overrides)


def test_zero_fall_speed_is_allowed():
    BulkMicroConfig(A_TVSB=0.0)


def test_config_constants():
    config = BulkMicroConfig(NC_0=1.0e8, SIG_GR=1.5)
    derived = ConfigConstants.make(config)
    np.testing.assert_allclose(derived.K_AU, constants.K_C / (20.0 * constants.X_S), rtol=1e-12)
    np.testing.assert_allclose(derived.NC_0_M23, 1.0e8 ** (-2.0 / 3.0), rtol=1e-12)
    np.testing.assert_allclose(derived.SIG2_GR, np.log(1.5) ** 2, rtol=1e-12)
    # geometric mean diameter from the mean volume diameter
    np.testing.assert_allclose(
        derived.DGR_FACTOR, np.exp(-1.5 * np.log(1.5) ** 2), rtol=1e-12
    )

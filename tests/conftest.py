import pytest

from ndsl.boilerplate import get_factories_single_tile
from pyBulkMicro.active_region import ActiveRegion
from pyBulkMicro.config import BulkMicroConfig
from pyBulkMicro.driver import make_state


NX, NY, NZ = 2, 2, 10
BACKEND = "numpy"


@pytest.fixture
def factories():
    return get_factories_single_tile(NX, NY, NZ, 0, BACKEND)


@pytest.fixture
def stencil_factory(factories):
    return factories[0]


@pytest.fixture
def quantity_factory(factories):
    return factories[1]


@pytest.fixture
def config():
    return BulkMicroConfig()


@pytest.fixture
def state(quantity_factory):
    """
    Uniform, subsaturated, cloud and rain free column. Tests add the water
    they need.
    """
    thermo, rain, shape, tendencies = make_state(quantity_factory)
    thermo.rhof.view[:] = 1.0
    thermo.exnf.view[:] = 1.0
    thermo.dzf.view[:] = 100.0
    thermo.tmp0.view[:] = 285.0
    thermo.thl0.view[:] = 285.0
    thermo.esl.view[:] = 1400.0
    thermo.qvsl.view[:] = 0.01
    thermo.qt0.view[:] = 0.005
    return thermo, rain, shape, tendencies


@pytest.fixture
def region(stencil_factory, quantity_factory, config):
    return ActiveRegion(stencil_factory, quantity_factory, config.QCMIN, config.QRMIN)

from dataclasses import dataclass

from ndsl import Quantity, QuantityFactory
from ndsl.constants import X_DIM, Y_DIM, Z_DIM


@dataclass
class Thermodynamics:
    """
    Host model state consumed read-only by the microphysics.

    rhof, exnf and dzf are vertical profiles, everything else is 3D.
    """

    rhof: Quantity
    exnf: Quantity
    dzf: Quantity
    ql0: Quantity
    qt0: Quantity
    thl0: Quantity
    tmp0: Quantity
    qvsl: Quantity
    esl: Quantity

    @classmethod
    def make(cls, quantity_factory: QuantityFactory):
        rhof = quantity_factory.zeros([Z_DIM], "kg/m^3")
        exnf = quantity_factory.zeros([Z_DIM], "n/a")
        dzf = quantity_factory.zeros([Z_DIM], "m")
        ql0 = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "kg/kg")
        qt0 = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "kg/kg")
        thl0 = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "K")
        tmp0 = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "K")
        qvsl = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "kg/kg")
        esl = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "Pa")
        return cls(rhof, exnf, dzf, ql0, qt0, thl0, tmp0, qvsl, esl)


@dataclass
class RainState:
    qr: Quantity
    nr: Quantity

    @classmethod
    def make(cls, quantity_factory: QuantityFactory):
        qr = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "kg/kg")
        nr = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "m^-3")
        return cls(qr, nr)


@dataclass
class RainShape:
    """Rain size distribution parameters derived from qr and nr."""

    dvr: Quantity  # mean volume diameter
    lbdr: Quantity  # gamma distribution slope
    mur: Quantity  # gamma distribution shape
    xr: Quantity  # mean drop mass

    @classmethod
    def make(cls, quantity_factory: QuantityFactory):
        dvr = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "m")
        lbdr = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "m^-1")
        mur = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "n/a")
        xr = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "kg")
        return cls(dvr, lbdr, mur, xr)


@dataclass
class Tendencies:
    qrp: Quantity
    nrp: Quantity
    qtpmcr: Quantity
    thlpmcr: Quantity
    precep: Quantity

    @classmethod
    def make(cls, quantity_factory: QuantityFactory):
        qrp = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "kg/kg/s")
        nrp = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "m^-3/s")
        qtpmcr = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "kg/kg/s")
        thlpmcr = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "K/s")
        # precipitation flux diagnostic
        precep = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "kg/kg m/s")
        return cls(qrp, nrp, qtpmcr, thlpmcr, precep)

    def reset(self):
        self.qrp.view[:] = 0
        self.nrp.view[:] = 0
        self.qtpmcr.view[:] = 0
        self.thlpmcr.view[:] = 0
        self.precep.view[:] = 0

from dataclasses import dataclass

from ndsl import Quantity, QuantityFactory
from ndsl.constants import X_DIM, Y_DIM, Z_DIM
from pyBulkMicro.state import RainShape


@dataclass
class Temporaries:
    qr_spl: Quantity
    nr_spl: Quantity
    qr_tmp: Quantity
    nr_tmp: Quantity
    sed_qr: Quantity
    sed_nr: Quantity
    shape: RainShape

    @classmethod
    def make(cls, quantity_factory: QuantityFactory):
        # working copies: snapshot of the current sub-step and its successor
        qr_spl = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "kg/kg")
        nr_spl = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "m^-3")
        qr_tmp = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "kg/kg")
        nr_tmp = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "m^-3")
        # flux buffers
        sed_qr = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "kg/m^2/s")
        sed_nr = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "m^-2/s")
        # shape of the working rain fields after the first sub-step
        shape = RainShape.make(quantity_factory)
        return cls(qr_spl, nr_spl, qr_tmp, nr_tmp, sed_qr, sed_nr, shape)

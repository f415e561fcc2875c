from typing import Tuple

from gt4py.cartesian.gtscript import PARALLEL, computation, interval

from ndsl import Quantity, QuantityFactory, StencilFactory
from ndsl.constants import X_DIM, Y_DIM, Z_DIM
from ndsl.dsl.typing import BoolField, FloatField, Int
from ndsl.logging import ndsl_log


def cloud_mask(ql0: FloatField, qcmask: BoolField):
    from __externals__ import qcmin

    with computation(PARALLEL), interval(...):
        if ql0 > qcmin:
            qcmask = True
        else:
            qcmask = False


def rain_mask(qr: FloatField, nr: FloatField, qrmask: BoolField):
    from __externals__ import qrmin

    with computation(PARALLEL), interval(...):
        if qr > qrmin and nr > 0.0:
            qrmask = True
        else:
            qrmask = False


def column_bounds(mask: Quantity) -> Tuple[int, int]:
    """
    Lowest and highest vertical index holding at least one masked cell.

    An empty mask returns (nz, -1) so that base > roof.
    """
    data = mask.view[:]
    levels = mask.np.nonzero(mask.np.any(data, axis=(0, 1)))[0]
    if levels.size == 0:
        return Int(data.shape[2]), Int(-1)
    return Int(levels[0]), Int(levels[-1])


class ActiveRegion:
    """
    Vertical range and per-cell masks of non-negligible cloud and rain water.

    Processes gate on both the mask and the [base, roof] range through
    k_level, which holds the vertical index of every cell.
    """

    def __init__(
        self,
        stencil_factory: StencilFactory,
        quantity_factory: QuantityFactory,
        qcmin: float,
        qrmin: float,
    ):
        self.qcmask = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "n/a", dtype=bool)
        self.qrmask = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "n/a", dtype=bool)
        self.k_level = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "n/a", dtype=Int)
        self.nz = self.k_level.view[:].shape[2]
        for k in range(self.nz):
            self.k_level.view[:, :, k] = k

        self.qcbase, self.qcroof = Int(self.nz), Int(-1)
        self.qrbase, self.qrroof = Int(self.nz), Int(-1)

        self._cloud_mask = stencil_factory.from_dims_halo(
            func=cloud_mask,
            compute_dims=[X_DIM, Y_DIM, Z_DIM],
            externals={"qcmin": qcmin},
        )
        self._rain_mask = stencil_factory.from_dims_halo(
            func=rain_mask,
            compute_dims=[X_DIM, Y_DIM, Z_DIM],
            externals={"qrmin": qrmin},
        )

    @property
    def cloud_is_empty(self) -> bool:
        return self.qcbase > self.qcroof

    @property
    def rain_is_empty(self) -> bool:
        return self.qrbase > self.qrroof

    @property
    def overlap(self) -> Tuple[int, int]:
        """Range where both cloud and rain are active. Empty if base > roof."""
        return max(self.qrbase, self.qcbase), min(self.qrroof, self.qcroof)

    def update_cloud(self, ql0: FloatField):
        self._cloud_mask(ql0, self.qcmask)
        self.qcbase, self.qcroof = column_bounds(self.qcmask)
        ndsl_log.debug(f"Cloud active range: [{self.qcbase}, {self.qcroof}]")

    def update_rain(self, qr: FloatField, nr: FloatField):
        self._rain_mask(qr, nr, self.qrmask)
        self.qrbase, self.qrroof = column_bounds(self.qrmask)
        ndsl_log.debug(f"Rain active range: [{self.qrbase}, {self.qrroof}]")

    def refresh_rain_mask(self, qr: FloatField, nr: FloatField):
        """Recompute the rain mask without touching the bounds."""
        self._rain_mask(qr, nr, self.qrmask)

    def lower_rain_base(self):
        """Admit the level below the current rain base. Never raises the base."""
        self.qrbase = Int(max(0, self.qrbase - 1))

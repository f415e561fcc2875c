import numpy as np

import pyBulkMicro.constants as constants
from ndsl import QuantityFactory, StencilFactory, orchestrate
from ndsl.constants import X_DIM, Y_DIM, Z_DIM
from ndsl.dsl.typing import Float
from pyBulkMicro.active_region import ActiveRegion
from pyBulkMicro.config import BulkMicroConfig
from pyBulkMicro.evaporation.stencils import evaporation_kk, evaporation_sb
from pyBulkMicro.evaporation.ventilation import VentilationTable
from pyBulkMicro.state import RainShape, RainState, Tendencies, Thermodynamics


class Evaporation:
    """
    Evaporation of rain in subsaturated air. At most the rain left after the
    processes that ran earlier in the step (qr + dt * qrp) is evaporated within dt.

    Reference: modbulkmicro evaporation (Seifert 2008).
    """

    def __init__(
        self,
        stencil_factory: StencilFactory,
        quantity_factory: QuantityFactory,
        config: BulkMicroConfig,
    ):
        self._use_ventilation = config.is_sb

        self.gamma21 = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "n/a")
        self.gamma251 = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "n/a")

        orchestrate(obj=self, config=stencil_factory.config.dace_config)

        if self._use_ventilation:
            self.ventilation_table = VentilationTable()
            b_over_a = config.B_TVSB / config.A_TVSB if config.A_TVSB > 0.0 else 0.0
            self._evaporation = stencil_factory.from_dims_halo(
                func=evaporation_sb,
                compute_dims=[X_DIM, Y_DIM, Z_DIM],
                externals={
                    "b_over_a": Float(b_over_a),
                    "c_tvsb": config.C_TVSB,
                    "vent_coef": Float(
                        constants.BVF
                        * constants.SC_NUM ** (1.0 / 3.0)
                        * np.sqrt(config.A_TVSB / constants.NU_A)
                    ),
                },
            )
        else:
            self._evaporation = stencil_factory.from_dims_halo(
                func=evaporation_kk,
                compute_dims=[X_DIM, Y_DIM, Z_DIM],
            )

    def __call__(
        self,
        thermo: Thermodynamics,
        rain: RainState,
        shape: RainShape,
        region: ActiveRegion,
        tendencies: Tendencies,
        dt: Float,
    ):
        if region.rain_is_empty:
            return

        if self._use_ventilation:
            self.ventilation_table.lookup(
                shape.mur, region.qrmask, self.gamma21, self.gamma251
            )

        self._evaporation(
            rain.qr,
            rain.nr,
            thermo.qt0,
            thermo.ql0,
            thermo.qvsl,
            thermo.tmp0,
            thermo.esl,
            thermo.rhof,
            thermo.exnf,
            shape.dvr,
            shape.lbdr,
            shape.mur,
            shape.xr,
            self.gamma21,
            self.gamma251,
            region.qrmask,
            region.k_level,
            region.qrbase,
            region.qrroof,
            tendencies.qrp,
            tendencies.nrp,
            tendencies.qtpmcr,
            tendencies.thlpmcr,
            Float(dt),
        )

from gt4py.cartesian.gtscript import PARALLEL, computation, interval

import pyBulkMicro.constants as constants
from ndsl import StencilFactory, orchestrate
from ndsl.constants import X_DIM, Y_DIM, Z_DIM
from ndsl.dsl.typing import FloatField, FloatFieldK
from pyBulkMicro.config import BulkMicroConfig
from pyBulkMicro.state import RainShape


def rain_parameters(
    qr: FloatField,
    nr: FloatField,
    rhof: FloatFieldK,
    dvr: FloatField,
    lbdr: FloatField,
    mur: FloatField,
    xr: FloatField,
):
    """
    Mean mass, mean volume diameter and gamma distribution parameters of rain.

    Parameters:
    qr (3D in): rain mixing ratio.
    nr (3D in): rain number concentration.
    rhof (1D in): air density.
    dvr (3D out): mean volume diameter.
    lbdr (3D out): slope of the gamma distribution, zero for KK.
    mur (3D out): shape of the gamma distribution, zero for KK.
    xr (3D out): mean drop mass, clipped to [xrmin, xrmax].
    """
    from __externals__ import l_mur_cst, l_sb, mur_cst

    with computation(PARALLEL), interval(...):
        xr = rhof * max(qr, 0.0) / (max(nr, 0.0) + constants.EPS0)
        xr = min(max(xr, constants.XRMIN), constants.XRMAX)
        dvr = (xr / constants.PIRHOW) ** (1.0 / 3.0)

        mur = 0.0
        lbdr = 0.0
        if l_sb:
            if l_mur_cst:
                mur = mur_cst
            else:
                # Stevens & Seifert (2008)
                mur = min(30.0, -1.0 + 0.008 / max(qr * rhof, constants.EPS0) ** 0.6)
            lbdr = ((mur + 3.0) * (mur + 2.0) * (mur + 1.0)) ** (1.0 / 3.0) / dvr


class RainParameters:
    """
    Derive the rain size distribution from mass and number.

    Any callable with the same signature can stand in for this class.
    """

    def __init__(
        self,
        stencil_factory: StencilFactory,
        config: BulkMicroConfig,
    ):
        orchestrate(obj=self, config=stencil_factory.config.dace_config)

        self._rain_parameters = stencil_factory.from_dims_halo(
            func=rain_parameters,
            compute_dims=[X_DIM, Y_DIM, Z_DIM],
            externals={
                "l_sb": config.is_sb,
                "l_mur_cst": config.L_MUR_CST,
                "mur_cst": config.MUR_CST,
            },
        )

    def __call__(
        self,
        qr: FloatField,
        nr: FloatField,
        rhof: FloatFieldK,
        shape: RainShape,
    ):
        self._rain_parameters(
            qr,
            nr,
            rhof,
            shape.dvr,
            shape.lbdr,
            shape.mur,
            shape.xr,
        )

import math

import numpy as np

import pyBulkMicro.constants as constants
from ndsl import Quantity
from ndsl.logging import ndsl_log


class VentilationTable:
    """
    Gamma function ratios of the rain ventilation factor (Seifert 2008),
    tabulated against the shape parameter mu every 1/100.

    gamma21(mu)  = Gamma(mu + 2)   / Gamma(mu + 1) * ((mu + 1)(mu + 2)(mu + 3))^(-1/3)
    gamma251(mu) = Gamma(mu + 2.5) / Gamma(mu + 1) * ((mu + 1)(mu + 2)(mu + 3))^(-1/2)

    The moments are normalised by the mean volume diameter rather than by the
    slope of the distribution.
    """

    def __init__(self):
        self.index_min = constants.VENT_TABLE_MIN_INDEX
        self.index_max = constants.VENT_TABLE_MAX_INDEX

        mu = np.arange(self.index_min, self.index_max + 1) / constants.VENT_TABLE_SCALE
        moments = (mu + 1.0) * (mu + 2.0) * (mu + 3.0)
        log_gamma_ratio = np.array(
            [math.lgamma(m + 2.5) - math.lgamma(m + 1.0) for m in mu]
        )
        self.gamma21 = (mu + 1.0) * moments ** (-1.0 / 3.0)
        self.gamma251 = np.exp(log_gamma_ratio) * moments ** (-0.5)

    def index(self, mur: np.ndarray) -> np.ndarray:
        """Nearest table index, rounding half away from zero."""
        scaled = mur * constants.VENT_TABLE_SCALE
        return np.sign(scaled) * np.floor(np.abs(scaled) + 0.5)

    def lookup(
        self,
        mur: Quantity,
        qrmask: Quantity,
        gamma21: Quantity,
        gamma251: Quantity,
    ):
        """
        Fill gamma21 and gamma251 from the shape parameter. Shapes outside the
        table are clamped to its ends.
        """
        xp = mur.np
        index = self.index(mur.view[:])
        clamped = xp.clip(index, self.index_min, self.index_max)

        n_outside = int(xp.count_nonzero((clamped != index) & qrmask.view[:]))
        if n_outside > 0:
            ndsl_log.warning(
                f"{n_outside} rain shape parameters outside the ventilation table "
                f"[{self.index_min / constants.VENT_TABLE_SCALE}, "
                f"{self.index_max / constants.VENT_TABLE_SCALE}], clamped"
            )

        position = clamped.astype(int) - self.index_min
        gamma21.view[:] = xp.asarray(self.gamma21)[position]
        gamma251.view[:] = xp.asarray(self.gamma251)[position]

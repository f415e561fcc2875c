import enum
from dataclasses import dataclass

import numpy as np

import pyBulkMicro.constants as constants
from ndsl.dsl.typing import Float


class MicrophysicsScheme(enum.Enum):
    """Closure family used by every process."""

    SB2006 = "seifert_beheng"
    KK2000 = "khairoutdinov_kogan"


@dataclass
class BulkMicroConfig:
    # Closure selection
    SCHEME: MicrophysicsScheme = MicrophysicsScheme.SB2006
    L_LOGNORMAL: bool = False
    L_MUR_CST: bool = False
    MUR_CST: Float = Float(5.0)
    # Cloud droplet number and activity thresholds
    NC_0: Float = Float(70.0e6)
    QCMIN: Float = Float(1.0e-7)
    QRMIN: Float = Float(1.0e-13)
    # Size distribution widths
    SIG_G: Float = Float(1.34)
    SIG_GR: Float = Float(1.5)
    # Rain terminal velocity (Stevens & Seifert 2008)
    A_TVSB: Float = Float(9.65)
    B_TVSB: Float = Float(9.8)
    C_TVSB: Float = Float(600.0)
    # Fall speed bound used to size rain sedimentation sub-steps
    WFALLMAX: Float = Float(9.9)
    # Supersaturation for activation [%]
    SSAT: Float = Float(0.2)

    def __post_init__(self):
        if not isinstance(self.SCHEME, MicrophysicsScheme):
            self.SCHEME = MicrophysicsScheme(self.SCHEME)
        if self.L_LOGNORMAL and self.SCHEME != MicrophysicsScheme.SB2006:
            raise NotImplementedError(
                "Lognormal rain sedimentation is only available "
                "with the Seifert & Beheng scheme"
            )
        for name in ("NC_0", "QCMIN", "QRMIN", "WFALLMAX", "SSAT"):
            if getattr(self, name) <= 0.0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        for name in ("SIG_G", "SIG_GR"):
            if getattr(self, name) <= 1.0:
                raise ValueError(
                    f"{name} is a geometric standard deviation and must exceed 1, "
                    f"got {getattr(self, name)}"
                )
        if self.A_TVSB < 0.0 or self.B_TVSB < 0.0 or self.C_TVSB <= 0.0:
            raise ValueError("Terminal velocity coefficients must be non-negative")
        if self.L_MUR_CST and self.MUR_CST <= -1.0:
            raise ValueError(f"MUR_CST must exceed -1, got {self.MUR_CST}")

    @property
    def is_sb(self) -> bool:
        return self.SCHEME == MicrophysicsScheme.SB2006


@dataclass
class ConfigConstants:
    K_AU: Float
    CSED: Float
    SIG2_GR: Float
    DGR_FACTOR: Float
    NC_0_M23: Float

    @classmethod
    def make(cls, config: BulkMicroConfig):
        # autoconversion kernel (Seifert & Beheng 2001)
        K_AU = constants.K_C / (Float(20.0) * constants.X_S)

        # cloud sedimentation flux coefficient for a lognormal droplet spectrum
        CSED = (
            constants.C_ST
            * (Float(3.0) / (Float(4.0) * constants.PI * constants.RHOW))
            ** (Float(2.0) / Float(3.0))
            * np.exp(Float(5.0) * np.log(config.SIG_G) ** 2, dtype=Float)
        )
        NC_0_M23 = config.NC_0 ** (Float(-2.0) / Float(3.0))

        # geometric mean diameter of the rain spectrum from the mean volume diameter
        SIG2_GR = Float(np.log(config.SIG_GR) ** 2)
        DGR_FACTOR = np.exp(Float(4.5) * SIG2_GR, dtype=Float) ** (
            Float(-1.0) / Float(3.0)
        )

        return cls(
            K_AU=Float(K_AU),
            CSED=Float(CSED),
            SIG2_GR=SIG2_GR,
            DGR_FACTOR=Float(DGR_FACTOR),
            NC_0_M23=Float(NC_0_M23),
        )

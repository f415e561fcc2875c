from typing import Sequence

from ndsl import QuantityFactory, StencilFactory, orchestrate
from ndsl.constants import X_DIM, Y_DIM, Z_DIM
from ndsl.dsl.typing import Float
from ndsl.logging import ndsl_log
from pyBulkMicro.activation.aerosol_mode import AerosolMode
from pyBulkMicro.activation.stencils import (
    accumulate_species,
    activate,
    activated_fractions,
    reset_mode_volume,
)
from pyBulkMicro.config import BulkMicroConfig
from pyBulkMicro.state import Thermodynamics


class Activation:
    """
    Activation of aerosol into cloud droplets at a prescribed supersaturation.
    Activated mass and number move from each activating mode to the in-cloud
    mode, so the aerosol total is unchanged.

    Reference: modbulkmicro aerosol activation (Koehler theory with kappa).
    """

    def __init__(
        self,
        stencil_factory: StencilFactory,
        quantity_factory: QuantityFactory,
        config: BulkMicroConfig,
    ):
        # Initalize temporaries
        self._volume = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "m^3/kg")
        self._kappa_volume = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "m^3/kg")
        self._fn = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "n/a")
        self._fm = quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], "n/a")

        orchestrate(obj=self, config=stencil_factory.config.dace_config)

        # Initalize stencils
        self._reset_mode_volume = stencil_factory.from_dims_halo(
            func=reset_mode_volume,
            compute_dims=[X_DIM, Y_DIM, Z_DIM],
        )
        self._accumulate_species = stencil_factory.from_dims_halo(
            func=accumulate_species,
            compute_dims=[X_DIM, Y_DIM, Z_DIM],
        )
        self._activated_fractions = stencil_factory.from_dims_halo(
            func=activated_fractions,
            compute_dims=[X_DIM, Y_DIM, Z_DIM],
            externals={"ssat": config.SSAT},
        )
        self._activate = stencil_factory.from_dims_halo(
            func=activate,
            compute_dims=[X_DIM, Y_DIM, Z_DIM],
        )

    def __call__(
        self,
        thermo: Thermodynamics,
        modes: Sequence[AerosolMode],
        in_cloud: AerosolMode,
        dt: Float,
    ):
        for mode in modes:
            if not mode.lactivation or mode is in_cloud:
                continue
            if mode.n_species != in_cloud.n_species:
                raise ValueError(
                    f"Mode {mode.name} has {mode.n_species} species "
                    f"but in-cloud mode {in_cloud.name} has {in_cloud.n_species}"
                )
            ndsl_log.debug(f"Activating aerosol mode {mode.name}")

            self._reset_mode_volume(self._volume, self._kappa_volume)
            for conc, rho_s, kappa_s in zip(mode.mass, mode.rho_s, mode.kappa_s):
                self._accumulate_species(
                    conc,
                    self._volume,
                    self._kappa_volume,
                    Float(rho_s),
                    Float(kappa_s),
                )

            self._activated_fractions(
                thermo.thl0,
                thermo.ql0,
                thermo.exnf,
                mode.number,
                self._volume,
                self._kappa_volume,
                self._fn,
                self._fm,
                Float(mode.sigma_g),
            )

            for s in range(mode.n_species):
                self._activate(
                    mode.mass[s],
                    self._fm,
                    mode.mass_tend[s],
                    mode.mass_acti[s],
                    in_cloud.mass_tend[s],
                    in_cloud.mass_acti[s],
                    Float(dt),
                )
            self._activate(
                mode.number,
                self._fn,
                mode.number_tend,
                mode.number_acti,
                in_cloud.number_tend,
                in_cloud.number_acti,
                Float(dt),
            )

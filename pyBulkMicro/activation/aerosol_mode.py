from dataclasses import dataclass
from typing import List, Sequence

from ndsl import Quantity, QuantityFactory
from ndsl.constants import X_DIM, Y_DIM, Z_DIM


@dataclass
class AerosolMode:
    """
    One lognormal aerosol mode made of several internally mixed species.

    mass holds one concentration field per species, ordered as rho_s and
    kappa_s. The in-cloud mode receiving activated aerosol must list its
    species in the same order as the modes feeding it.
    """

    name: str
    mass: List[Quantity]
    number: Quantity
    rho_s: List[float]  # species density [kg/m^3]
    kappa_s: List[float]  # species hygroscopicity
    sigma_g: float  # geometric standard deviation
    lactivation: bool
    mass_tend: List[Quantity]
    mass_acti: List[Quantity]
    number_tend: Quantity
    number_acti: Quantity

    @classmethod
    def make(
        cls,
        quantity_factory: QuantityFactory,
        name: str,
        rho_s: Sequence[float],
        kappa_s: Sequence[float],
        sigma_g: float,
        lactivation: bool = True,
    ):
        if len(rho_s) != len(kappa_s):
            raise ValueError(
                f"Mode {name}: {len(rho_s)} species densities "
                f"but {len(kappa_s)} hygroscopicities"
            )
        if sigma_g <= 1.0:
            raise ValueError(f"Mode {name}: sigma_g must exceed 1, got {sigma_g}")

        def field(units):
            return quantity_factory.zeros([X_DIM, Y_DIM, Z_DIM], units)

        n_species = len(rho_s)
        return cls(
            name=name,
            mass=[field("kg/kg") for _ in range(n_species)],
            number=field("kg^-1"),
            rho_s=list(rho_s),
            kappa_s=list(kappa_s),
            sigma_g=sigma_g,
            lactivation=lactivation,
            mass_tend=[field("kg/kg/s") for _ in range(n_species)],
            mass_acti=[field("kg/kg/s") for _ in range(n_species)],
            number_tend=field("kg^-1/s"),
            number_acti=field("kg^-1/s"),
        )

    @property
    def n_species(self) -> int:
        return len(self.mass)

from .aerosol_mode import AerosolMode
from .main import Activation


__all__ = ["Activation", "AerosolMode"]

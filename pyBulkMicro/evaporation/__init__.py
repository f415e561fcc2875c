from .main import Evaporation


__all__ = ["Evaporation"]

from .main import RainSedimentation, number_of_substeps


__all__ = ["RainSedimentation", "number_of_substeps"]

from .metrics import FitQuality, fit_quality

__all__ = ["FitQuality", "fit_quality"]

from .engine import FitFailedError, ForecastSession, GrowthForecastEngine

__all__ = ["FitFailedError", "ForecastSession", "GrowthForecastEngine"]

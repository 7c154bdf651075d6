from .fitter import CurveFitter, FitResult, FitSettings, GradientGuard, fit_gompertz

__all__ = ["CurveFitter", "FitResult", "FitSettings", "GradientGuard", "fit_gompertz"]

"""Gompertz baseline fitting and intervention scenario forecasting.

Pipeline: parse -> quality analysis -> interpolation -> curve fit -> scenarios.
"""

from .config import load_config, ProjectConfig

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class FitQuality:
    r2: float
    rmse: float
    invalid_predictions: int


def fit_quality(y_true: np.ndarray, y_pred: np.ndarray) -> FitQuality:
    """R-squared and RMSE of fitted values against observations.

    Non-finite predictions are skipped when accumulating both sums of squares;
    they are counted in `invalid_predictions`. RMSE is normalised by the full
    series length. R-squared is clamped to [0, 1] and is 0 when the observed
    series has no variance.
    """

    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    n = y_true.size
    if n == 0:
        return FitQuality(r2=0.0, rmse=float("nan"), invalid_predictions=0)

    mask = np.isfinite(y_pred)
    mean = float(np.mean(y_true))
    ss_res = float(np.sum((y_true[mask] - y_pred[mask]) ** 2))
    ss_tot = float(np.sum((y_true[mask] - mean) ** 2))

    r2 = float(np.clip(1.0 - ss_res / ss_tot, 0.0, 1.0)) if ss_tot > 0 else 0.0
    rmse = float(np.sqrt(ss_res / n))
    return FitQuality(r2=r2, rmse=rmse, invalid_predictions=int(n - mask.sum()))

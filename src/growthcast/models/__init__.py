from .gompertz import GompertzParams, curve, evaluate

__all__ = ["GompertzParams", "curve", "evaluate"]

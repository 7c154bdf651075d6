from .quarters import following_periods, generate_quarters, parse_quarter

__all__ = ["following_periods", "generate_quarters", "parse_quarter"]

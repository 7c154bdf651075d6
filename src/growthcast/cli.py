from __future__ import annotations

import argparse
import logging

from growthcast import ProjectConfig, load_config
from growthcast.config import DataConfig
from growthcast.data import points_frame
from growthcast.decision import summary_frame
from growthcast.monitoring import recommend_actions
from growthcast.pipeline import GrowthForecastEngine


def _positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return n


def _config_from_args(args: argparse.Namespace) -> ProjectConfig:
    cfg = load_config(args.config) if getattr(args, "config", None) else ProjectConfig()
    if args.data or args.sample:
        cfg.data = DataConfig(
            path=args.data,
            use_sample=args.sample,
            interpolation=cfg.data.interpolation,
        )
    if getattr(args, "interpolation", None):
        cfg.data.interpolation = args.interpolation
    if getattr(args, "horizon", None) is not None:
        cfg.forecast.horizon_quarters = args.horizon
    if getattr(args, "launch", None) is not None:
        cfg.forecast.launch_quarter = args.launch
    return cfg


def _cmd_quality(args: argparse.Namespace) -> int:
    engine = GrowthForecastEngine(_config_from_args(args))
    session = engine.load_session()
    report = engine.analyze(session)

    print(f"Quality score: {report.score}/100 ({report.level.value})")
    print(f"  points: {report.total_count}, valid: {report.valid_count}, missing: {report.missing_count}")
    print(report.to_frame().to_string(index=False))
    if args.points:
        print(points_frame(session.points).to_string(index=False))
    for action in recommend_actions(report):
        print(f"  - {action}")
    return 0


def _cmd_fit(args: argparse.Namespace) -> int:
    engine = GrowthForecastEngine(_config_from_args(args))
    session = engine.load_session()
    engine.analyze(session)
    engine.interpolate(session)
    result = engine.fit(session)

    p = result.params
    print(f"K  = {p.K:.2f}")
    print(f"b  = {p.b:.4f}")
    print(f"t0 = {p.t0:.2f}")
    print(f"R2 = {result.r2:.4f}  RMSE = {result.rmse:.2f}  valid = {result.valid}")
    return 0


def _cmd_forecast(args: argparse.Namespace) -> int:
    engine = GrowthForecastEngine(_config_from_args(args))
    session = engine.run()
    bundle = session.forecast

    print(bundle.to_frame().to_string(index=False))
    print(f"\nUncertainty: ±{bundle.uncertainty_percent:g}% (quality {session.quality.score}/100)")
    print(summary_frame(bundle).to_string(index=False))
    return 0


def _add_data_args(p: argparse.ArgumentParser) -> None:
    src = p.add_mutually_exclusive_group()
    src.add_argument("--data", help="Path to a headerless period,value file")
    src.add_argument("--sample", action="store_true", help="Use the built-in sample dataset")
    p.add_argument("--config", help="Path to YAML config")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="growthcast")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_quality = sub.add_parser("quality", help="Score input data quality")
    _add_data_args(p_quality)
    p_quality.add_argument("--points", action="store_true", help="Also print the per-quarter table")
    p_quality.set_defaults(func=_cmd_quality)

    p_fit = sub.add_parser("fit", help="Fit the Gompertz baseline")
    _add_data_args(p_fit)
    p_fit.add_argument("--interpolation", choices=["ignore", "linear", "gompertz", "forward"])
    p_fit.set_defaults(func=_cmd_fit)

    p_fc = sub.add_parser("forecast", help="Fit and project intervention scenarios")
    _add_data_args(p_fc)
    p_fc.add_argument("--interpolation", choices=["ignore", "linear", "gompertz", "forward"])
    p_fc.add_argument("--horizon", type=_positive_int, help="Forecast horizon in quarters")
    p_fc.add_argument("--launch", type=_positive_int, help="Launch quarter (1-based, after history)")
    p_fc.set_defaults(func=_cmd_forecast)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    )
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())

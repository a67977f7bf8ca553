from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from quant_mini.config.pipeline_config import PipelineConfig
from quant_mini.live.feed import BinanceTradeFeed, ReplayFeed
from quant_mini.live.pipeline import LivePipeline
from quant_mini.live.prometheus_exporter import start_metrics_server

LOGGER = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        "quant-mini",
        description="Binance WS -> MA strategy -> paper trading -> metrics",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional JSON config file; flags below override its values.",
    )
    parser.add_argument("--symbol", default=None, help="Trading symbol, e.g. btcusdt.")
    parser.add_argument(
        "--ma-window",
        type=int,
        default=None,
        help="Moving average window size (number of trades).",
    )
    parser.add_argument(
        "--threshold-bps",
        type=int,
        default=None,
        help="Threshold in basis points (e.g. 10 = 0.1%%) to trigger entry/exit.",
    )
    parser.add_argument("--metrics-port", type=int, default=None, help="Metrics server port.")
    parser.add_argument("--queue-capacity", type=int, default=None)
    parser.add_argument(
        "--event-log",
        type=Path,
        default=None,
        help="Append decision and fill events as JSON lines to this file.",
    )
    parser.add_argument(
        "--replay",
        type=Path,
        default=None,
        help="Replay raw feed messages (one per line) instead of connecting.",
    )
    parser.add_argument("--log-level", default="INFO")

    return parser


def load_config(args: argparse.Namespace) -> PipelineConfig:
    base = PipelineConfig.from_json_file(args.config) if args.config else PipelineConfig()
    return base.with_overrides(
        symbol=args.symbol,
        window_size=args.ma_window,
        threshold_bps=args.threshold_bps,
        metrics_port=args.metrics_port,
        queue_capacity=args.queue_capacity,
        event_log_path=args.event_log,
    )


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = load_config(args)
    LOGGER.info("Starting pipeline", extra={"config": cfg.model_dump(mode="json")})

    pipeline = LivePipeline(cfg)
    start_metrics_server(pipeline.metrics, cfg.metrics_port)

    if args.replay is not None:
        source = ReplayFeed(args.replay)
    else:
        source = BinanceTradeFeed(cfg.stream_url)

    snap = asyncio.run(pipeline.run(source.messages()))

    LOGGER.info(
        "Pipeline finished: trades=%d decisions=%d fills=%d dropped=%d pnl=%s",
        snap.trades_total,
        snap.decisions_total,
        snap.fills_total,
        snap.events_dropped_total,
        snap.pnl,
    )


if __name__ == "__main__":
    main()

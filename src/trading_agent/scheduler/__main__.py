"""Allow running the trading loop as: python -m trading_agent.scheduler [--config path]."""

import argparse

from trading_agent.scheduler.runner import main

parser = argparse.ArgumentParser(description="Trading agent scheduler")
parser.add_argument("--config", default=None, help="Path to config.yaml")
args = parser.parse_args()
raise SystemExit(main(config_path=args.config))

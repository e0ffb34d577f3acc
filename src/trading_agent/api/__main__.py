"""Allow running the API as: python -m trading_agent.api [--config path]."""

import argparse

from trading_agent.api.runner import main

parser = argparse.ArgumentParser(description="Trading agent ledger API")
parser.add_argument("--config", default=None, help="Path to config.yaml")
args = parser.parse_args()
main(config_path=args.config)

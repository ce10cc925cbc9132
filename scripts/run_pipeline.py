"""Convenience launcher for the pipeline."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from expression_pipeline.config import load_config
from expression_pipeline.pipeline import ExpressionPipeline


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the expression pipeline")
    parser.add_argument("--config", type=Path, required=True, help="Path to YAML configuration")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    config = load_config(args.config)
    pipeline = ExpressionPipeline(config)
    pipeline.run_from_config()


if __name__ == "__main__":
    main()

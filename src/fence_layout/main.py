#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Script: main.py
Location: src/fence_layout/main.py

Description:
    Command line entry point for the fence layout engine. Reads a fence
    project (runs, gates and carried-over offcuts) from JSON, recalculates
    panels, posts and gate checks, and writes the layout as JSON.

Usage:
    python -m fence_layout.main project.json
    python -m fence_layout.main project.json --mm-per-unit 10 --output layout.json
    fence-layout project.json --config layout_config.json --debug
    fence-layout project.json --trace --log-dir logs
"""

import argparse
import json
import sys
from typing import List, Optional

from pydantic import ValidationError

from fence_layout.config.layout_config import LayoutConfig
from fence_layout.layout_engine import recalculate
from fence_layout.schemas.project_models import ProjectModel
from fence_layout.utils.logging_config import FenceLayoutLogger, get_logger

logger = get_logger(__name__)


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Fence run layout: panels, posts and gate checks"
    )

    parser.add_argument(
        "project",
        help="Path to the fence project JSON file"
    )
    parser.add_argument(
        "--config",
        help="Path to a JSON file overriding layout configuration values"
    )
    parser.add_argument(
        "--mm-per-unit",
        type=float,
        default=None,
        help="Drawing scale in millimetres per coordinate unit (enables return geometry)"
    )
    parser.add_argument(
        "--output",
        help="Write the layout JSON here instead of stdout"
    )
    parser.add_argument(
        "--log-dir",
        help="Directory for a log file (optional)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output"
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Log every panel cut (more verbose than --debug)"
    )

    return parser.parse_args(argv)


def load_config(path: Optional[str]) -> LayoutConfig:
    """Load and validate layout configuration."""
    if not path:
        return LayoutConfig()
    with open(path, "r", encoding="utf-8") as f:
        config = LayoutConfig.from_dict(json.load(f))
    config.validate()
    return config


def load_project(path: str) -> ProjectModel:
    """Load and validate a fence project file."""
    with open(path, "r", encoding="utf-8") as f:
        return ProjectModel.model_validate(json.load(f))


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    args = parse_arguments(argv)
    FenceLayoutLogger.configure(
        debug_mode=args.debug, log_dir=args.log_dir, trace_mode=args.trace
    )

    try:
        config = load_config(args.config)
        project = load_project(args.project)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Could not read input: %s", e)
        return 1
    except ValidationError as e:
        logger.error("Invalid project file %s:\n%s", args.project, e)
        return 1
    except (TypeError, ValueError) as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    lines, gates, pool = project.to_domain()
    result = recalculate(lines, gates, pool, config, mm_per_unit=args.mm_per_unit)

    for warning in result.warnings:
        logger.warning("%s%s", f"[{warning.run_id}] " if warning.run_id else "", warning.text)

    output = json.dumps(result.to_dict(), indent=2)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
        logger.info("Layout written to %s", args.output)
    else:
        sys.stdout.write(output + "\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())

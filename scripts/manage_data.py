#!/usr/bin/env python3
# =========================================
# 📄 File: scripts/manage_data.py
# Purpose: Command-line runner for the data manager, using YAML config loader
# - --loaddata PATH [--overwrite] : import the movie CSV into the index
# - --refresh NAME / --refresh-all : refresh cached chart artifacts
# =========================================

import os
import sys
import logging
import argparse

sys.path.append(os.path.join(os.path.dirname(__file__), ".."))  # Project root, for runs without an install

from config.config_loader import get_config
from profitable_movies.cache.freshness import CacheFreshnessController
from profitable_movies.etl.import_movies import import_movies

log = logging.getLogger("manage_data")


# -----------------------
# CLI interface
# -----------------------
def parse_args(argv=None):
    """
    Command-line interface options:
    --config       : explicit YAML config file (default config/{ENV}.yaml)
    --loaddata     : path of a movie CSV file to load into the configured index
    --overwrite    : drop and recreate the index before loading
    --refresh      : refresh one cached artifact by filename
    --refresh-all  : refresh every registered artifact
    --timeout      : seconds allowed for each refresh (or for provisioning and each insert)
    """
    p = argparse.ArgumentParser(
        description="Profitable movies data manager (Elasticsearch import + chart cache)"
    )
    p.add_argument("--config", type=str, default=None, help="Path to YAML config file")
    action = p.add_mutually_exclusive_group(required=True)
    action.add_argument(
        "--loaddata",
        type=str,
        help="Provide the path of a CSV data file to load into the index specified in the config",
    )
    action.add_argument("--refresh", type=str, metavar="NAME", help="Refresh one cached artifact")
    action.add_argument("--refresh-all", action="store_true", help="Refresh every registered artifact")
    p.add_argument(
        "--overwrite",
        action="store_true",
        help="Overwrite existing index when loading data",
    )
    p.add_argument("--timeout", type=float, default=None, help="Time limit in seconds for each refresh; for --loaddata, for provisioning and each insert")
    return p.parse_args(argv)


def main(argv=None):
    """
    Main execution flow:
    - Reads config and sets up logging from it
    - Imports movies, or refreshes the requested artifacts
    """
    args = parse_args(argv)
    try:
        cfg = get_config(args.config)
        logging.basicConfig(
            level=cfg["log_level"],
            format="%(asctime)s [%(levelname)s] %(message)s",
        )

        if args.loaddata:
            count = import_movies(args.loaddata, args.overwrite, cfg=cfg, timeout=args.timeout)
            log.info(f"✅ Movies imported successfully ({count})")
            return 0

        controller = CacheFreshnessController(load_config=lambda: cfg)
        names = sorted(controller.search_specs) if args.refresh_all else [args.refresh]
        for name in names:
            updated = controller.refresh(name, timeout=args.timeout)
            log.info(f"{name}: {'updated' if updated else 'up-to-date'}")
        return 0
    except Exception as e:
        if not logging.getLogger().handlers:
            logging.basicConfig(format="%(asctime)s [%(levelname)s] %(message)s")
        log.exception(f"❌ Data manager failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""Convenience runner for the YAMAP to GPX converter.

Usage:
    python run.py --link https://yamap.com/activities/39755763
"""
import logging
import sys

from yamap_gpx.main import main

if __name__ == "__main__":
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s %(name)s: %(message)s")
    sys.exit(main())

#!/usr/bin/env python3
"""Nagios plugin entrypoint — run one query and report OK/WARNING/CRITICAL/UNKNOWN.

Usage::

    python scripts/check_postgresql.py -d monitor@db1/app \
        -q "SELECT count(*) FROM pg_stat_activity" -w 80 -c 95

    # Custom config file and verbose logs on stderr
    python scripts/check_postgresql.py --config config/settings.yaml \
        --log-level DEBUG -d monitor@db1/app -q "SELECT 1"
"""

from __future__ import annotations

import sys

from pgcheck.cli import main

if __name__ == "__main__":
    sys.exit(main())

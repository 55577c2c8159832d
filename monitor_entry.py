#!/usr/bin/env python3
"""Entry point for PyInstaller-frozen executable."""

import sys

from sim_monitor.cli import main
sys.exit(main())

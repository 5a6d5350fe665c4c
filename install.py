#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Entry point for the Docker binary installer.

Usage: install.py -D | -I [options]
"""

import sys

from docker_binary_installer.cli import main

if __name__ == "__main__":
    sys.exit(main())

# -*- coding: utf-8 -*-
"""
Installer for the Docker static binary distribution.

Downloads a release tarball, places the binaries, writes the systemd unit
and daemon.json, and starts the service.
"""

__version__ = "0.1.0"

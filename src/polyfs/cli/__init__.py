# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.14
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/cli/__init__.py

"""Command Line Interface package for polyfs."""

from .main import app

__all__ = ['app']

# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.14
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/core/__init__.py

"""Entry handles, overwrite policy, transfer engine and encoding pipeline."""

# SPDX-License-Identifier: MIT
"""Core model and resolution for cmakegen."""

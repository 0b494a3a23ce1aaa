# SPDX-License-Identifier: MIT
"""Toolset abstraction and registry."""

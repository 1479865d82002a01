# File: src/fence_layout/config/__init__.py

"""
Configuration package for the fence layout engine.
"""

from .layout_config import LayoutConfig

__all__ = ["LayoutConfig"]

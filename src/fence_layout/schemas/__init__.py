# File: src/fence_layout/schemas/__init__.py
"""Validated input models for fence project payloads."""

from .project_models import (
    PointModel,
    FenceLineModel,
    GateModel,
    LeftoverModel,
    ProjectModel,
)

__all__ = [
    "PointModel",
    "FenceLineModel",
    "GateModel",
    "LeftoverModel",
    "ProjectModel",
]

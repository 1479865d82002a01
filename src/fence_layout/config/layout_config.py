# File: src/fence_layout/config/layout_config.py
"""
Layout configuration for fence run planning.

This module defines the tunable constants used by the panel allocator,
the post classifier and the gate validator: stock panel size, offcut
rules, coordinate tolerances and sliding-return defaults.

Example:
    >>> config = LayoutConfig(panel_length_mm=2390.0, cut_buffer_mm=300.0)
    >>> config.validate()
    []
    >>> print(config.min_leftover_mm)  # 300.0
"""

import math
from dataclasses import dataclass, fields
from typing import List


@dataclass
class LayoutConfig:
    """Configuration for fence layout.

    Attributes:
        panel_length_mm: Manufactured stock panel length (L).
        min_leftover_mm: Shortest offcut worth keeping for reuse (M).
        cut_buffer_mm: Material lost per cut beyond the piece length (B).
        epsilon_mm: Position equality tolerance along a run (E).
        vertex_tolerance: Per-axis coordinate tolerance for matching line
            endpoints, in drawing units.
        collinear_tolerance_rad: Angular tolerance for treating two runs
            at a vertex as one straight line.
        post_key_step: Grid step used to deduplicate post positions.
        min_line_length_mm: Shortest run the drawing accepts; shorter runs get
            an advisory.
        snap_tolerance: Distance within which a drawn point snaps to an
            existing endpoint, in drawing units.
        orthogonal_tolerance: Largest axis offset for a run to count as
            horizontal or vertical, in drawing units.
        default_return_length_mm: Return space required behind a sliding
            gate when the gate declares none.
        return_thickness_mm: Drawn thickness of a sliding return run.
        min_return_thickness_units: Minimum drawn thickness in drawing units.
        auto_even_spacing: Switch a run to even spacing when fixed panels
            would leave a remainder shorter than min_leftover_mm.
        warn_on_t_junctions: Emit an advisory where more than two runs meet.
    """
    # Stock and cutting
    panel_length_mm: float = 2390.0
    min_leftover_mm: float = 300.0
    cut_buffer_mm: float = 300.0
    epsilon_mm: float = 0.5

    # Topology
    vertex_tolerance: float = 1.0
    collinear_tolerance_rad: float = 0.1
    post_key_step: float = 1.0
    min_line_length_mm: float = 300.0

    # Drawing
    snap_tolerance: float = 40.0
    orthogonal_tolerance: float = 0.01

    # Sliding gates
    default_return_length_mm: float = 4800.0
    return_thickness_mm: float = 51.0
    min_return_thickness_units: float = 8.0

    # Recalculation behaviour
    auto_even_spacing: bool = True
    warn_on_t_junctions: bool = True

    def validate(self) -> List[str]:
        """Validate configuration parameters.

        Returns:
            List of validation error messages (empty if valid)

        Raises:
            ValueError: If any validation fails
        """
        errors = []

        # Values loaded from JSON may be of any type
        for f in fields(self):
            value = getattr(self, f.name)
            if f.type in (bool, "bool"):
                if not isinstance(value, bool):
                    errors.append(f"{f.name} must be true or false")
            elif isinstance(value, bool) or not isinstance(value, (int, float)):
                errors.append(f"{f.name} must be a number, got {value!r}")
        if errors:
            raise ValueError("LayoutConfig validation failed:\n" + "\n".join(errors))

        for name in (
            "panel_length_mm",
            "epsilon_mm",
            "vertex_tolerance",
            "post_key_step",
            "default_return_length_mm",
            "snap_tolerance",
            "orthogonal_tolerance",
        ):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                errors.append(f"{name} must be positive")

        if self.min_leftover_mm < 0:
            errors.append("min_leftover_mm cannot be negative")
        if self.min_line_length_mm < 0:
            errors.append("min_line_length_mm cannot be negative")
        if self.cut_buffer_mm < 0:
            errors.append("cut_buffer_mm cannot be negative")
        if self.min_leftover_mm >= self.panel_length_mm:
            errors.append(
                f"min_leftover_mm ({self.min_leftover_mm}) must be less than "
                f"panel_length_mm ({self.panel_length_mm})"
            )
        if not 0 <= self.collinear_tolerance_rad < math.pi / 2:
            errors.append("collinear_tolerance_rad must be within [0, pi/2)")
        if self.return_thickness_mm <= 0:
            errors.append("return_thickness_mm must be positive")
        if self.min_return_thickness_units < 0:
            errors.append("min_return_thickness_units cannot be negative")

        if errors:
            raise ValueError("LayoutConfig validation failed:\n" + "\n".join(errors))

        return errors

    def to_dict(self) -> dict:
        """Convert config to dictionary for JSON serialization."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict) -> "LayoutConfig":
        """Create config from dictionary, ignoring unknown keys.

        Args:
            data: Dictionary with config parameters

        Returns:
            LayoutConfig instance
        """
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def default(cls) -> "LayoutConfig":
        """Config with the standard residential panel system."""
        return cls()

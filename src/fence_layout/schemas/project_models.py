# File: src/fence_layout/schemas/project_models.py

"""Input models for fence project payloads.

Validates the JSON a drawing client saves (runs, gates and carried-over
offcuts) and converts it into the engine's dataclasses. Both snake_case
and the client's camelCase keys are accepted.
"""

import math
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core.fence_types import (
    FenceLine,
    Gate,
    GateType,
    Leftover,
    LeftoverPool,
    Point,
    ReturnDirection,
)
from ..geometry.primitives import is_orthogonal


class PointModel(BaseModel):
    """Planar point."""
    x: float = Field(description="X coordinate")
    y: float = Field(description="Y coordinate")

    @field_validator("x", "y")
    @classmethod
    def validate_coordinate(cls, v: float) -> float:
        """Reject NaN and infinite coordinates."""
        if not math.isfinite(v):
            raise ValueError("Coordinate must be finite")
        return v

    def to_domain(self) -> Point:
        return Point(self.x, self.y)


class FenceLineModel(BaseModel):
    """One fence run."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    a: PointModel
    b: PointModel
    length_mm: float = Field(ge=0, description="Run length in millimetres")
    locked_90: Optional[bool] = Field(
        default=None, description="Derived from the drawn direction when omitted"
    )
    even_spacing: bool = False
    gate_id: Optional[str] = Field(default=None, alias="gateId")

    @field_validator("length_mm")
    @classmethod
    def validate_length(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("length_mm must be finite")
        return v

    def to_domain(self) -> FenceLine:
        return FenceLine(
            id=self.id,
            a=self.a.to_domain(),
            b=self.b.to_domain(),
            length_mm=self.length_mm,
            locked_90=(
                self.locked_90 if self.locked_90 is not None
                else is_orthogonal(self.a.to_domain(), self.b.to_domain())
            ),
            even_spacing=self.even_spacing,
            gate_id=self.gate_id,
        )


class GateModel(BaseModel):
    """A gate attached to a run."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    type: str
    opening_mm: float = Field(default=0.0, ge=0)
    run_id: str = Field(alias="runId")
    sliding_return_direction: Literal["left", "right"] = Field(
        default="left", alias="slidingReturnDirection"
    )
    return_length_mm: Optional[float] = Field(default=None, gt=0, alias="returnLength_mm")
    width_range: Optional[str] = Field(default=None, alias="widthRange")

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        """Normalise to the canonical gate type id."""
        return GateType.parse(v).value

    def to_domain(self) -> Gate:
        return Gate(
            id=self.id,
            type=GateType(self.type),
            opening_mm=self.opening_mm,
            run_id=self.run_id,
            sliding_return_direction=ReturnDirection(self.sliding_return_direction),
            return_length_mm=self.return_length_mm,
            width_range=self.width_range,
        )


class LeftoverModel(BaseModel):
    """An offcut carried over from an earlier pass."""
    id: str = Field(min_length=1)
    length_mm: float = Field(gt=0)
    consumed: bool = False

    def to_domain(self) -> Leftover:
        return Leftover(id=self.id, length_mm=self.length_mm, consumed=self.consumed)


class ProjectModel(BaseModel):
    """A complete fence drawing."""
    lines: List[FenceLineModel] = Field(default_factory=list)
    gates: List[GateModel] = Field(default_factory=list)
    leftovers: List[LeftoverModel] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_references(self) -> "ProjectModel":
        """Check ids are unique and gates and runs point at each other."""
        line_ids = [line.id for line in self.lines]
        if len(set(line_ids)) != len(line_ids):
            raise ValueError("Duplicate line ids")
        gate_ids = [gate.id for gate in self.gates]
        if len(set(gate_ids)) != len(gate_ids):
            raise ValueError("Duplicate gate ids")

        lines_by_id = {line.id: line for line in self.lines}
        gates_by_id = {gate.id: gate for gate in self.gates}

        for gate in self.gates:
            line = lines_by_id.get(gate.run_id)
            if line is None:
                raise ValueError(f"Gate {gate.id} refers to unknown run {gate.run_id}")
            if line.gate_id is not None and line.gate_id != gate.id:
                raise ValueError(
                    f"Run {line.id} carries gate {line.gate_id}, not {gate.id}"
                )

        runs_with_gates = [gate.run_id for gate in self.gates]
        if len(set(runs_with_gates)) != len(runs_with_gates):
            raise ValueError("A run can carry at most one gate")

        for line in self.lines:
            if line.gate_id is None:
                continue
            gate = gates_by_id.get(line.gate_id)
            if gate is None:
                raise ValueError(f"Run {line.id} refers to unknown gate {line.gate_id}")
            if gate.run_id != line.id:
                raise ValueError(f"Gate {gate.id} is attached to {gate.run_id}, not {line.id}")

        return self

    def to_domain(self) -> Tuple[List[FenceLine], List[Gate], LeftoverPool]:
        """Convert to (lines, gates, leftover pool)."""
        return (
            [line.to_domain() for line in self.lines],
            [gate.to_domain() for gate in self.gates],
            LeftoverPool.of([l.to_domain() for l in self.leftovers]),
        )

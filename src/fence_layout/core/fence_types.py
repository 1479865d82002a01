# File: src/fence_layout/core/fence_types.py

"""Data models for fence run layout.

Defines the value types shared by the panel allocator, the post classifier
and the gate validator. All lengths are in millimetres; point coordinates
use a single linear unit chosen by the caller (millimetres in the domain
model, drawing units when a scale is supplied).

Key Types:
    Point: Planar coordinate.
    FenceLine: One straight run between two posts.
    GateType / GateKind: Gate catalogue entries and their behaviour class.
    Gate: A gate attached to a run.
    PanelSegment: One cut piece placed along a run.
    Leftover / LeftoverPool: Offcut stock threaded through an allocation pass.
    Post: A derived post with its topological category.
    WarningMsg: Advisory finding emitted by a recalculation pass.
"""

from dataclasses import dataclass, field, replace
from typing import List, Dict, Optional, Any
from enum import Enum


# =============================================================================
# Enumerations
# =============================================================================


class PostCategory(Enum):
    """Topological role of a post in the fence graph."""

    END = "end"
    """Terminates a run, or sits next to a gate."""

    CORNER = "corner"
    """Two runs meeting at an angle, or three or more runs meeting."""

    LINE = "line"
    """Intermediate post between collinear runs or at a panel joint."""


class GateKind(Enum):
    """Behaviour class of a gate type."""

    SWING = "swing"
    """Hinged leaf or leaves, no return run needed."""

    SLIDING = "sliding"
    """Sliding leaf, needs clear return space behind the opening."""

    OPENING = "opening"
    """Plain opening with no leaf, width supplied by the user."""


class GateType(Enum):
    """Catalogue gate types."""

    SINGLE_900 = "single_900"
    SINGLE_1800 = "single_1800"
    DOUBLE_900 = "double_900"
    DOUBLE_1800 = "double_1800"
    SLIDING_4800 = "sliding_4800"
    OPENING_CUSTOM = "opening_custom"

    @property
    def kind(self) -> GateKind:
        """Behaviour class for this gate type."""
        if self is GateType.SLIDING_4800:
            return GateKind.SLIDING
        if self is GateType.OPENING_CUSTOM:
            return GateKind.OPENING
        return GateKind.SWING

    @property
    def default_width_mm(self) -> Optional[float]:
        """Default opening width, or None when the type has no default."""
        return _GATE_DEFAULT_WIDTHS_MM.get(self)

    @classmethod
    def parse(cls, value: "str | GateType") -> "GateType":
        """
        Create GateType from a string identifier.

        Accepts both underscore and hyphen spellings, and the reversed
        ``custom-opening`` form used by older drawings.

        Raises:
            ValueError: If value doesn't match any gate type
        """
        if isinstance(value, GateType):
            return value
        token = value.strip().lower().replace("-", "_")
        if token == "custom_opening":
            token = "opening_custom"
        for member in cls:
            if member.value == token:
                return member
        raise ValueError(
            f"Unknown gate type: {value}. "
            f"Valid types: {[m.value for m in cls]}"
        )


_GATE_DEFAULT_WIDTHS_MM: Dict[GateType, float] = {
    GateType.SINGLE_900: 900.0,
    GateType.SINGLE_1800: 1800.0,
    GateType.DOUBLE_900: 1800.0,
    GateType.DOUBLE_1800: 3600.0,
    GateType.SLIDING_4800: 4800.0,
}


class ReturnDirection(Enum):
    """Side of the gate run the sliding leaf returns towards."""

    LEFT = "left"
    """Anchored on the run's ``a`` endpoint."""

    RIGHT = "right"
    """Anchored on the run's ``b`` endpoint."""

    @property
    def side(self) -> str:
        """Endpoint name of the anchor ("a" or "b")."""
        return "a" if self is ReturnDirection.LEFT else "b"


class ResolutionStatus(Enum):
    """Outcome of a lookup that can fail in more than one way."""

    RESOLVED = "resolved"
    NOT_FOUND = "not_found"
    AMBIGUOUS = "ambiguous"


# =============================================================================
# Data Models
# =============================================================================


@dataclass(frozen=True)
class Point:
    """Planar coordinate."""

    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Point":
        return cls(x=float(data["x"]), y=float(data["y"]))


@dataclass
class FenceLine:
    """One straight fence run between two posts.

    ``length_mm`` is authoritative for allocation and validation; ``a`` and
    ``b`` are authoritative for topology and geometry. The two may disagree
    when the drawing allows the length to be edited independently.

    Attributes:
        id: Unique run identifier.
        a: Start point.
        b: End point.
        length_mm: Run length in millimetres.
        locked_90: Whether the run is constrained to 90 degree angles.
        even_spacing: Whether panels are divided evenly along the run.
        gate_id: Gate occupying this run, if any.
    """

    id: str
    a: Point
    b: Point
    length_mm: float
    locked_90: bool = False
    even_spacing: bool = False
    gate_id: Optional[str] = None

    def endpoint(self, side: str) -> Point:
        """Return endpoint ``a`` or ``b``."""
        if side == "a":
            return self.a
        if side == "b":
            return self.b
        raise ValueError(f"Unknown endpoint side: {side}")

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "id": self.id,
            "a": self.a.to_dict(),
            "b": self.b.to_dict(),
            "length_mm": self.length_mm,
            "locked_90": self.locked_90,
            "even_spacing": self.even_spacing,
        }
        if self.gate_id is not None:
            result["gate_id"] = self.gate_id
        return result


@dataclass
class Gate:
    """A gate installed on a run.

    Attributes:
        id: Unique gate identifier.
        type: Catalogue gate type.
        opening_mm: Explicit opening width; wins over the type default when positive.
        run_id: Run the gate occupies.
        sliding_return_direction: Which end the sliding leaf returns towards.
        return_length_mm: Required return space; the configured default when None.
        width_range: Declared catalogue width range ("min/max" in metres).
    """

    id: str
    type: GateType
    opening_mm: float
    run_id: str
    sliding_return_direction: ReturnDirection = ReturnDirection.LEFT
    return_length_mm: Optional[float] = None
    width_range: Optional[str] = None

    def __post_init__(self):
        """Convert string enum values if needed."""
        if isinstance(self.type, str):
            self.type = GateType.parse(self.type)
        if isinstance(self.sliding_return_direction, str):
            self.sliding_return_direction = ReturnDirection(
                self.sliding_return_direction
            )

    @property
    def kind(self) -> GateKind:
        return self.type.kind

    @property
    def is_sliding(self) -> bool:
        return self.type.kind is GateKind.SLIDING

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "opening_mm": self.opening_mm,
            "run_id": self.run_id,
            "sliding_return_direction": self.sliding_return_direction.value,
            "return_length_mm": self.return_length_mm,
            "width_range": self.width_range,
        }


@dataclass(frozen=True)
class PanelSegment:
    """One physical cut piece along a run, in run-local millimetres."""

    id: str
    run_id: str
    start_mm: float
    end_mm: float
    length_mm: float
    uses_leftover_id: Optional[str] = None
    is_remainder: bool = False

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "id": self.id,
            "run_id": self.run_id,
            "start_mm": round(self.start_mm, 3),
            "end_mm": round(self.end_mm, 3),
            "length_mm": round(self.length_mm, 3),
            "is_remainder": self.is_remainder,
        }
        if self.uses_leftover_id is not None:
            result["uses_leftover_id"] = self.uses_leftover_id
        return result


@dataclass(frozen=True)
class Leftover:
    """An offcut available for a later, shorter cut."""

    id: str
    length_mm: float
    consumed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "length_mm": round(self.length_mm, 3),
            "consumed": self.consumed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Leftover":
        return cls(
            id=data["id"],
            length_mm=float(data["length_mm"]),
            consumed=bool(data.get("consumed", False)),
        )


@dataclass
class LeftoverPool:
    """Ordered offcut stock owned by one recalculation pass.

    The pool is threaded through allocation calls as a value: each call
    works on a copy and hands back the updated pool. Consumed leftovers are
    kept (flagged) for auditing but are never offered again.

    Attributes:
        leftovers: Leftovers in insertion order.
        issued: Number of ids issued so far, used for deterministic ids.
    """

    leftovers: List[Leftover] = field(default_factory=list)
    issued: int = 0

    def __len__(self) -> int:
        return len(self.leftovers)

    def copy(self) -> "LeftoverPool":
        return LeftoverPool(leftovers=list(self.leftovers), issued=self.issued)

    def available(self) -> List[Leftover]:
        """Non-consumed leftovers in insertion order."""
        return [l for l in self.leftovers if not l.consumed]

    def get(self, leftover_id: str) -> Optional[Leftover]:
        for leftover in self.leftovers:
            if leftover.id == leftover_id:
                return leftover
        return None

    def consume(self, leftover_id: str) -> Leftover:
        """Mark a leftover consumed and return the updated entry.

        Raises:
            KeyError: If the leftover is unknown
            ValueError: If it was already consumed
        """
        for i, leftover in enumerate(self.leftovers):
            if leftover.id == leftover_id:
                if leftover.consumed:
                    raise ValueError(f"Leftover {leftover_id} already consumed")
                updated = replace(leftover, consumed=True)
                self.leftovers[i] = updated
                return updated
        raise KeyError(leftover_id)

    def next_id(self) -> str:
        """Reserve the next deterministic leftover id."""
        self.issued += 1
        # Restored pools may already hold caller-chosen ids
        while self.get(f"leftover_{self.issued}") is not None:
            self.issued += 1
        return f"leftover_{self.issued}"

    def register(self, length_mm: float) -> Leftover:
        """Add a new offcut with the next deterministic id."""
        leftover = Leftover(id=self.next_id(), length_mm=length_mm)
        self.leftovers.append(leftover)
        return leftover

    def extend(self, leftovers: List[Leftover]) -> None:
        self.leftovers.extend(leftovers)

    def total_available_mm(self) -> float:
        return sum(l.length_mm for l in self.available())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "issued": self.issued,
            "leftovers": [l.to_dict() for l in self.leftovers],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LeftoverPool":
        leftovers = [Leftover.from_dict(d) for d in data.get("leftovers", [])]
        return cls(leftovers=leftovers, issued=data.get("issued", len(leftovers)))

    @classmethod
    def of(cls, leftovers: List[Leftover]) -> "LeftoverPool":
        """Wrap existing leftovers, e.g. ones restored from a saved session."""
        return cls(leftovers=list(leftovers), issued=len(leftovers))


@dataclass(frozen=True)
class Post:
    """A derived post. Never authoritative: rebuilt from lines and gates."""

    id: str
    pos: Point
    category: PostCategory

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "pos": self.pos.to_dict(),
            "category": self.category.value,
        }


@dataclass(frozen=True)
class WarningMsg:
    """Advisory finding from a recalculation pass."""

    id: str
    text: str
    run_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {"id": self.id, "text": self.text}
        if self.run_id is not None:
            result["run_id"] = self.run_id
        return result

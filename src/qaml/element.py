"""Flat, serializable element model shared by the flattener and the planner."""
from dataclasses import dataclass

from .errors import DecodeError


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class Frame:
    """Axis-aligned rectangle in driver (logical) points."""
    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def intersects(self, other: "Frame") -> bool:
        """True when the two rectangles share a non-empty area."""
        if self.width <= 0 or self.height <= 0 or other.width <= 0 or other.height <= 0:
            return False
        return (
            self.left < other.right and other.left < self.right
            and self.top < other.bottom and other.top < self.bottom
        )

    def scaled(self, factor: float) -> tuple[int, int, int, int]:
        return (
            round(self.x * factor),
            round(self.y * factor),
            round(self.width * factor),
            round(self.height * factor),
        )


@dataclass(frozen=True)
class Element:
    """One interactive UI node as sent to the planner."""
    left: int
    top: int
    width: int
    height: int
    type: str
    label: str
    value: str | None = None
    placeholder: str | None = None

    def to_dict(self) -> dict:
        data = {
            "left": self.left,
            "top": self.top,
            "width": self.width,
            "height": self.height,
            "type": self.type,
            "label": self.label,
        }
        if self.value is not None:
            data["value"] = self.value
        if self.placeholder is not None:
            data["placeholder"] = self.placeholder
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Element":
        if not isinstance(data, dict):
            raise DecodeError(f"Element must be an object, got {type(data).__name__}")
        try:
            return cls(
                left=int(data["left"]),
                top=int(data["top"]),
                width=int(data["width"]),
                height=int(data["height"]),
                type=str(data["type"]),
                label=str(data["label"]),
                value=data.get("value"),
                placeholder=data.get("placeholder"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeError(f"Malformed element {data!r}: {e}") from e

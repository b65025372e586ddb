"""Data types for UI driver snapshots."""
from dataclasses import dataclass, field

from ..element import Frame
from ..roles import ElementRole


@dataclass
class UINode:
    """One node of a captured UI tree."""
    role: ElementRole
    frame: Frame
    label: str = ""
    identifier: str = ""
    value: object = None
    placeholder: str | None = None
    enabled: bool = True
    window_context_id: int | None = None  # 0 marks an inactive window grouping
    children: list["UINode"] = field(default_factory=list)

    def __post_init__(self):
        self.role = ElementRole.parse(self.role)

"""Snapshot flattener — native UI tree → ordered, scaled Element list."""
import logging
from dataclasses import dataclass, field
from typing import Iterator

from .driver.types import UINode
from .element import Element, Frame, Size
from .errors import CaptureUnavailable
from .roles import ElementRole, KEYBOARD_ROLES, TEXT_INPUT_ROLES

log = logging.getLogger(__name__)


@dataclass
class Capture:
    elements: list[Element]
    keyboard_shown: bool = False


@dataclass
class AlertContents:
    texts: list[str] = field(default_factory=list)
    buttons: list[Element] = field(default_factory=list)


def scale_factor(screen_size: Size, app_frame: Frame) -> float:
    """Ratio from driver points to device-independent pixels."""
    if not app_frame.width:
        raise CaptureUnavailable("Target app reports an empty frame")
    return screen_size.width / app_frame.width


def _walk(root: UINode) -> Iterator[UINode]:
    """Pre-order traversal.

    Inactive window groupings (context id 0) are skipped with their subtree,
    and the children of labeled buttons are never visited.
    """
    stack = [root]
    while stack:
        node = stack.pop()
        if node.window_context_id == 0:
            continue
        yield node
        if node.role is ElementRole.BUTTON and node.label:
            continue
        stack.extend(reversed(node.children))


def _is_relevant(node: UINode, capture_frame: Frame) -> bool:
    described = bool(node.label or node.identifier) or node.value is not None or node.role in TEXT_INPUT_ROLES
    return (
        described
        and node.enabled
        and node.frame.intersects(capture_frame)
        and node.role is not ElementRole.KEY
    )


def to_element(node: UINode, scale: float = 1.0) -> Element:
    left, top, width, height = node.frame.scaled(scale)
    return Element(
        left=left,
        top=top,
        width=width,
        height=height,
        type=node.role.value,
        label=node.label or node.identifier,
        value=str(node.value) if node.value is not None else None,
        placeholder=node.placeholder,
    )


def flatten(root: UINode, scale: float = 1.0, capture_frame: Frame = None) -> Capture:
    """Flatten a captured tree into the element list sent to the planner.

    Elements are ordered by ascending top edge (ties keep traversal order).
    Keyboards and keys never appear in the list; an on-screen keyboard is
    reported through `keyboard_shown` instead.
    """
    capture_frame = capture_frame or root.frame
    retained: list[UINode] = []
    keyboard_shown = False

    for node in _walk(root):
        if node.role in KEYBOARD_ROLES and node.frame.intersects(capture_frame):
            keyboard_shown = True
        if _is_relevant(node, capture_frame):
            retained.append(node)

    retained.sort(key=lambda n: n.frame.y)
    elements = [to_element(n, scale) for n in retained if n.role not in KEYBOARD_ROLES]
    log.debug(f"Flattened {len(retained)} nodes into {len(elements)} elements (keyboard={keyboard_shown}, scale={scale:.3f})")
    return Capture(elements=elements, keyboard_shown=keyboard_shown)


def collect_alert(root: UINode) -> AlertContents:
    """Split an alert subtree into its message lines and button candidates."""
    contents = AlertContents()
    for node in _walk(root):
        if not _is_relevant(node, root.frame):
            continue
        if node.role is ElementRole.STATIC_TEXT and node.label:
            contents.texts.append(node.label)
        elif node.role is ElementRole.BUTTON:
            contents.buttons.append(to_element(node))
    return contents

"""Remote planner client — /execute, /assert and /call round-trips."""
import json
import logging
from dataclasses import asdict, dataclass, field

import httpx

from . import debug
from .bridge import PlannerTransport, RunLoop
from .config import EngineConfig
from .element import Element, Size
from .errors import AssertionNotSatisfied, DecodeError, RemoteError, TransportError

log = logging.getLogger(__name__)


@dataclass
class Action:
    """One primitive returned by the planner; `arguments` is already decoded."""
    name: str
    arguments: dict

    @classmethod
    def decode(cls, raw) -> "Action":
        """Decode `{name, arguments}` where arguments is a JSON-encoded object."""
        if not isinstance(raw, dict) or not isinstance(raw.get("name"), str):
            raise DecodeError(f"Failed to decode action: {raw!r}")
        arguments = raw.get("arguments", "{}")
        if isinstance(arguments, str):
            try:
                arguments = json.loads(arguments) if arguments.strip() else {}
            except json.JSONDecodeError as e:
                raise DecodeError(f"Failed to decode arguments for {raw['name']}: {e}") from e
        if not isinstance(arguments, dict):
            raise DecodeError(f"Arguments for {raw['name']} must be an object, got {type(arguments).__name__}")
        return cls(name=raw["name"], arguments=arguments)


@dataclass
class ScreenState:
    """Everything the planner sees of the screen for one request."""
    elements: list[Element]
    keyboard_shown: bool
    screen_size: Size
    screenshot: str  # base64 PNG


@dataclass
class AssertionResult:
    result: bool
    reason: str = ""


@dataclass
class Tool:
    name: str
    description: str
    arguments: dict[str, dict[str, str]] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)


SELECT_ELEMENT_TOOL = Tool(
    name="selectElement",
    description="select the specified element",
    arguments={
        "elementID": {
            "type": "integer",
            "description": "the ID of the element to select",
        },
    },
    required=["elementID"],
)


class PlannerClient:
    def __init__(self, config: EngineConfig, transport: PlannerTransport, run_loop: RunLoop):
        self.config = config
        self.transport = transport
        self.run_loop = run_loop

    def settle(self):
        """Give UI animations time to finish before the screen is captured."""
        delay = self.config.auto_delay + self.config.settle_delay
        if delay > 0:
            self.run_loop.sleep(delay)

    # ─── Requests ───────────────────────────────────────────────

    def plan(self, instruction: str, state: ScreenState) -> list[Action]:
        payload = {
            "action": instruction,
            **self._screen_fields(state),
            "is_keyboard_shown": state.keyboard_shown,
        }
        debug.log_planner_request("/execute", instruction, len(state.elements), state.keyboard_shown)
        body = self._post("/execute", payload)
        if not isinstance(body, list):
            raise DecodeError(f"Failed to decode response: expected a list of actions, got {type(body).__name__}")

        actions = [Action.decode(raw) for raw in body]
        debug.log_planner_response("/execute", ", ".join(a.name for a in actions) or "no actions")
        log.info(f"Planner returned {len(actions)} action(s) for {instruction!r}")
        return actions

    def assert_condition(self, assertion: str, state: ScreenState) -> AssertionResult:
        """Ask whether `assertion` holds; raises AssertionNotSatisfied when it does not."""
        payload = {
            "assertion": assertion,
            **self._screen_fields(state),
        }
        debug.log_planner_request("/assert", assertion, len(state.elements))
        body = self._post("/assert", payload)
        if not isinstance(body, list) or not body:
            raise DecodeError(f"Failed to decode response: expected a non-empty list, got {body!r}")

        arguments = Action.decode(body[0]).arguments
        result = arguments.get("result")
        if not isinstance(result, bool):
            raise DecodeError(f"Invalid response from QAML API: 'result' must be a boolean, got {result!r}")
        reason = str(arguments.get("reason") or "")
        debug.log_planner_response("/assert", f"{result} — {reason}")

        if not result:
            raise AssertionNotSatisfied(assertion, reason)
        return AssertionResult(result=True, reason=reason)

    def select_element(self, instructions: str, context: str, elements: list[Element]) -> Element:
        """Let the planner pick one of `elements` following `instructions`."""
        system_prompt = (
            f"INSTRUCTIONS: {instructions}. Use the instructions to select the best element out of "
            f"the provided element list. Window content: {context}. INSTRUCTIONS: {instructions}"
        )
        payload = {
            "systemPrompt": system_prompt,
            "elements": [e.to_dict() for e in elements],
            "tools": [asdict(SELECT_ELEMENT_TOOL)],
            "base64Image": None,
            "shouldUseVisionElements": False,
        }
        debug.log_planner_request("/call", instructions, len(elements))
        body = self._post("/call", payload)
        if not isinstance(body, dict):
            raise DecodeError(f"Failed to decode response: expected an object, got {type(body).__name__}")

        tool_calls = body.get("toolCalls")
        if not isinstance(tool_calls, list) or not tool_calls:
            raise DecodeError("Invalid response from QAML API: no tool calls returned")
        candidates = [Element.from_dict(raw) for raw in body.get("elements") or []]

        element_id = Action.decode(tool_calls[0]).arguments.get("elementID")
        if not isinstance(element_id, int) or isinstance(element_id, bool):
            raise DecodeError(f"Invalid response from QAML API: elementID must be an integer, got {element_id!r}")
        if not 0 <= element_id < len(candidates):
            raise DecodeError(f"Invalid response from QAML API: elementID {element_id} out of range ({len(candidates)} elements)")

        chosen = candidates[element_id]
        debug.log_planner_response("/call", f"selected {chosen.label!r}")
        return chosen

    # ─── Helpers ────────────────────────────────────────────────

    def _screen_fields(self, state: ScreenState) -> dict:
        return {
            "screen_size": {"width": int(state.screen_size.width), "height": int(state.screen_size.height)},
            "screenshot": state.screenshot,
            "platform": self.config.platform,
            "extra_context": self.config.system_prompt,
            "accessibility_elements": [e.to_dict() for e in state.elements],
        }

    def _post(self, path: str, payload: dict):
        resp = self.transport.post(path, payload)
        return self._decode_body(path, resp)

    def _decode_body(self, path: str, resp: httpx.Response):
        try:
            body = resp.json()
        except ValueError as e:
            if resp.is_error:
                raise TransportError(f"{path} returned HTTP {resp.status_code}") from e
            raise DecodeError(f"Failed to decode response from {path}: {e}") from e

        if isinstance(body, dict) and body.get("error") is not None:
            log.warning(f"Planner error on {path}: {body['error']}")
            raise RemoteError(str(body["error"]))
        if resp.is_error:
            raise TransportError(f"{path} returned HTTP {resp.status_code}")
        return body

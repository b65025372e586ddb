"""Exception taxonomy for the automation engine."""


class QamlError(Exception):
    """Base for failures that end the current instruction and get reported."""


class CaptureUnavailable(QamlError):
    pass


class TransportError(QamlError):
    pass


class DecodeError(QamlError):
    pass


class RemoteError(QamlError):
    """Well-formed error envelope returned by the planner."""

    def __init__(self, message: str):
        super().__init__(f"API Error: {message}")
        self.message = message


class InvalidActionArguments(QamlError):
    def __init__(self, action: str, field: str, expected: str):
        super().__init__(f"Invalid arguments for action '{action}': field '{field}' must be {expected}")
        self.action = action
        self.field = field
        self.expected = expected


class AssertionNotSatisfied(QamlError):
    """The planner judged a condition false. Drives retries in waiting flows."""

    def __init__(self, condition: str, reason: str = ""):
        super().__init__(f"Assertion failed: {condition}. Reason: {reason}")
        self.condition = condition
        self.reason = reason


class AssertionFailed(AssertionError):
    """Terminal failure as seen by the host test framework."""


class UnknownActionError(RuntimeError):
    """The planner sent an action name this engine does not implement.

    Indicates a protocol version mismatch; never converted into a reported
    test failure.
    """

    def __init__(self, name: str):
        super().__init__(f"Invalid action: {name}")
        self.name = name

"""Typed failures of the Course Reviews domain.

Every failed precondition surfaces as one of four exceptions, each a
subclass of the Protean exception closest in meaning so that Protean's own
handlers (and callers catching ``ValidationError``/``ObjectNotFoundError``)
keep working. Messages follow Protean's ``{"field": ["message", ...]}`` shape.
"""

from protean.exceptions import ObjectNotFoundError, ProteanException, ValidationError


class _FieldMessages:
    def __init__(self, messages: dict[str, list[str]]):
        super().__init__(messages)
        self.messages = messages

    def __str__(self) -> str:
        return str(self.messages)


class NotFound(_FieldMessages, ObjectNotFoundError):
    """A referenced user, course, review or response does not exist."""


class Forbidden(_FieldMessages, ProteanException):
    """The actor lacks rights on this specific resource instance."""


class Conflict(_FieldMessages, ProteanException):
    """A uniqueness rule would be violated (duplicate review, response, code...)."""


class InvalidArgument(_FieldMessages, ValidationError):
    """Malformed input: rating out of range, unknown status, role or course type."""


HTTP_STATUS_CODES = {
    NotFound: 404,
    Forbidden: 403,
    Conflict: 409,
    InvalidArgument: 400,
}


def not_found(kind: str, identifier) -> NotFound:
    return NotFound({kind: [f"{kind.capitalize()} {identifier} does not exist"]})

"""Error taxonomy.

- InvalidInput: formula precondition violated. Raised to the caller of the
  calculator, never retried.
- TransportFailure / SessionFailure: remote peer problems. Raised and caught
  inside the MCP client only; callers see an absent value instead.

"Not found" is not an exception: the resolver returns None once every tier
is exhausted.
"""


class EscalationError(Exception):
    """Base class for price escalation errors."""


class InvalidInput(EscalationError, ValueError):
    """Escalation inputs violate the formula preconditions."""


class TransportFailure(EscalationError):
    """The remote index service was unreachable or returned garbage."""


class SessionFailure(TransportFailure):
    """The MCP handshake did not yield a session id."""

"""Exception types raised by the trait engine and the record loaders."""


class ExplorerError(Exception):
    """Base class for all trait explorer errors."""


class LoadFailure(ExplorerError):
    """A record resource could not be read or parsed.

    Raised for malformed JSON, malformed record structure, or transport
    errors other than "resource absent".  A missing individual record is
    not a failure; loaders log and skip it instead.
    """

    def __init__(self, message: str, resource: str = ""):
        super().__init__(message)
        self.resource = resource


class InvalidKey(ExplorerError, KeyError):
    """Toggle was called with a (trait_type, value) pair not in the index."""

    def __init__(self, trait_type: str, value: str):
        super().__init__(f"Unknown trait selection: {trait_type!r} = {value!r}")
        self.trait_type = trait_type
        self.value = value

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.args[0]


class SessionNotReady(ExplorerError):
    """The engine was used before the record collection finished loading."""

    def __init__(self, state: str, detail: str = ""):
        message = f"Session is not ready (state={state})"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.state = state
        self.detail = detail

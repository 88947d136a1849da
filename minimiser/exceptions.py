class AutomatonError(ValueError):
    """Base class for every error caused by a client-supplied automaton."""


class MalformedAutomatonError(AutomatonError):
    """The automaton document does not have the expected JSON shape."""


class StateNameCollisionError(AutomatonError):
    """Two distinct states would be written under the same display name."""

    def __init__(self, name: str):
        super().__init__(
            f"Two different states are both named {name!r}; "
            f"rename states containing ' + ' or ' | '"
        )
        self.value = name


class AutomatonTooLargeError(AutomatonError):
    """The automaton has more states than the service is willing to process."""

    def __init__(self, state_count: int, limit: int, what: str = 'Automaton'):
        super().__init__(f"{what} has {state_count} states, the limit is {limit}")
        self.state_count = state_count
        self.limit = limit


class ValidationError(AutomatonError):
    """
    A well-shaped automaton that breaks one of the structural invariants.

    Attributes:
        kind: Short machine-readable code for the failed check
        value: The offending state or symbol
    """
    kind = 'invalid'
    label = 'value'

    def __init__(self, value: str):
        super().__init__(f"Unknown {self.label}: {value!r}")
        self.value = value


class UnknownStateError(ValidationError):
    kind = 'unknown_state'
    label = 'state'


class UnknownSymbolError(ValidationError):
    kind = 'unknown_symbol'
    label = 'symbol'

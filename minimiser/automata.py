from dataclasses import dataclass
from typing import Dict, FrozenSet, Hashable, Iterable, List


def state_name(state: Hashable) -> str:
    """
    Render a state as its display name.

    Plain state ids render as themselves, composite states render as the
    sorted display names of their members joined by the composite's separator.
    """
    return str(state)


def sorted_states(states: Iterable[Hashable]) -> List[Hashable]:
    """Sort states by display name, the order every stage iterates in."""
    return sorted(states, key=state_name)


class StateSet(frozenset):
    """A DFA state built by subset construction: the set of NFA states it stands for."""
    separator = ' + '

    def __str__(self):
        return self.separator.join(sorted(state_name(state) for state in self))


class MergedState(frozenset):
    """A minimal DFA state: the class of equivalent DFA states it stands for."""
    separator = ' | '

    def __str__(self):
        return self.separator.join(sorted(state_name(state) for state in self))


@dataclass(frozen=True)
class RawNfa:
    """
    An NFA exactly as supplied by a client. Nothing about it has been checked
    beyond its JSON shape, so it can only be handed to `validate_nfa`.

    Attributes:
        start: The starting state
        alphabet: The symbols the automaton reads
        final_states: The accepting states
        nodes: state -> symbol -> set of destination states
    """
    start: str
    alphabet: FrozenSet[str]
    final_states: FrozenSet[str]
    nodes: Dict[str, Dict[str, FrozenSet[str]]]


@dataclass(frozen=True)
class VerifiedNfa:
    """
    An NFA that has passed validation. Only `validate_nfa` builds one, and
    only this type is accepted by `nfa_to_dfa`.
    """
    start: str
    alphabet: FrozenSet[str]
    final_states: FrozenSet[str]
    nodes: Dict[str, Dict[str, FrozenSet[str]]]

    @property
    def states(self) -> FrozenSet[str]:
        return frozenset(self.nodes)


@dataclass(frozen=True)
class RawDfa:
    """A DFA exactly as supplied by a client, to be handed to `validate_dfa`."""
    start: str
    alphabet: FrozenSet[str]
    final_states: FrozenSet[str]
    nodes: Dict[str, Dict[str, str]]


@dataclass(frozen=True)
class Dfa:
    """
    A deterministic automaton. Every `Dfa` is verified by construction.

    States are any hashable value: plain ids for a DFA read from JSON,
    `StateSet`s after subset construction and `MergedState`s after
    minimisation.
    """
    start: Hashable
    alphabet: FrozenSet[str]
    final_states: FrozenSet[Hashable]
    nodes: Dict[Hashable, Dict[str, Hashable]]

    @property
    def states(self) -> FrozenSet[Hashable]:
        return frozenset(self.nodes)

    def is_total(self) -> bool:
        """True if every state has exactly one transition on every symbol."""
        return all(
            set(transitions) == self.alphabet
            for transitions in self.nodes.values()
        )

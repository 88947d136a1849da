import logging
from typing import FrozenSet, Iterable, Mapping, Union

from .automata import Dfa, RawDfa, RawNfa, VerifiedNfa
from .exceptions import AutomatonTooLargeError, UnknownStateError, UnknownSymbolError

logger = logging.getLogger(__name__)


def _check_structure(start: str, final_states: Iterable[str], alphabet: FrozenSet[str],
                     nodes: Mapping[str, Mapping[str, Iterable[str]]]) -> None:
    """
    Runs the four structural checks shared by NFAs and DFAs, in order,
    stopping at the first failure. Items are visited in sorted order so the
    reported item is the same on every run.

    Args:
        start: The starting state
        final_states: The accepting states
        alphabet: The declared symbols
        nodes: state -> symbol -> destination states

    Raises:
        UnknownStateError: If the start state, a final state or a destination is not a node
        UnknownSymbolError: If a transition uses a symbol outside the alphabet
    """
    # The start state must be a known state
    if start not in nodes:
        raise UnknownStateError(start)

    # Every final state must be a known state
    for state in sorted(final_states):
        if state not in nodes:
            raise UnknownStateError(state)

    # Every transition must be on a declared symbol
    for state in sorted(nodes):
        for symbol in sorted(nodes[state]):
            if symbol not in alphabet:
                raise UnknownSymbolError(symbol)

    # Every transition must lead to a known state
    for state in sorted(nodes):
        for symbol in sorted(nodes[state]):
            for destination in sorted(nodes[state][symbol]):
                if destination not in nodes:
                    raise UnknownStateError(destination)


def validate_nfa(raw: RawNfa) -> VerifiedNfa:
    """
    Proves a client-supplied NFA well formed.

    Args:
        raw: The unverified NFA

    Returns:
        VerifiedNfa: A structurally identical NFA that may be determinised

    Raises:
        UnknownStateError: If a referenced state is not one of the NFA's nodes
        UnknownSymbolError: If a transition uses a symbol outside the alphabet
    """
    _check_structure(raw.start, raw.final_states, raw.alphabet, raw.nodes)

    logger.debug("Validated NFA with %d states", len(raw.nodes))
    return VerifiedNfa(
        start=raw.start,
        alphabet=raw.alphabet,
        final_states=raw.final_states,
        nodes={state: dict(transitions) for state, transitions in raw.nodes.items()},
    )


def validate_dfa(raw: RawDfa) -> Dfa:
    """
    Proves a client-supplied DFA well formed, with the same checks and in the
    same order as `validate_nfa`.

    Args:
        raw: The unverified DFA

    Returns:
        Dfa: A structurally identical DFA that may be minimised

    Raises:
        UnknownStateError: If a referenced state is not one of the DFA's nodes
        UnknownSymbolError: If a transition uses a symbol outside the alphabet
    """
    as_sets = {
        state: {symbol: (destination,) for symbol, destination in transitions.items()}
        for state, transitions in raw.nodes.items()
    }
    _check_structure(raw.start, raw.final_states, raw.alphabet, as_sets)

    logger.debug("Validated DFA with %d states", len(raw.nodes))
    return Dfa(
        start=raw.start,
        alphabet=raw.alphabet,
        final_states=raw.final_states,
        nodes={state: dict(transitions) for state, transitions in raw.nodes.items()},
    )


def check_size(automaton: Union[RawNfa, RawDfa], limit: int) -> None:
    """
    Refuses automata with more than `limit` states. Subset construction is
    exponential in the number of NFA states in the worst case.

    Raises:
        AutomatonTooLargeError: If the automaton has too many states
    """
    if len(automaton.nodes) > limit:
        raise AutomatonTooLargeError(len(automaton.nodes), limit)

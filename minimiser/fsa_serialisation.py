from typing import Any, Dict, Hashable, Set, Union

from .automata import Dfa, RawDfa, RawNfa, VerifiedNfa, sorted_states, state_name
from .exceptions import MalformedAutomatonError, StateNameCollisionError

REQUIRED_KEYS = ['start', 'alphabet', 'final_states', 'nodes']


def _string_list(value: Any, key: str) -> frozenset:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise MalformedAutomatonError(f'{key} must be a list of strings')
    return frozenset(value)


def _check_envelope(data: Any) -> None:
    """
    Checks the keys and value types shared by NFA and DFA documents.

    Raises:
        MalformedAutomatonError: If the document does not have the wire format's shape
    """
    if not isinstance(data, dict):
        raise MalformedAutomatonError('Automaton must be a JSON object')

    for key in REQUIRED_KEYS:
        if key not in data:
            raise MalformedAutomatonError(f'Missing required key: {key}')

    if not isinstance(data['start'], str):
        raise MalformedAutomatonError('start must be a string')

    if not isinstance(data['nodes'], dict):
        raise MalformedAutomatonError('nodes must be an object')

    for state, transitions in data['nodes'].items():
        if not isinstance(transitions, dict):
            raise MalformedAutomatonError(f'Transitions of state {state!r} must be an object')


def nfa_from_json(data: Any) -> RawNfa:
    """
    Decodes an NFA document. Each symbol maps to a list of destinations.

    Args:
        data: The decoded JSON body

    Returns:
        RawNfa: The automaton, not yet validated

    Raises:
        MalformedAutomatonError: If the document does not have the NFA shape
    """
    _check_envelope(data)

    nodes = {}
    for state, transitions in data['nodes'].items():
        nodes[state] = {}
        for symbol, destinations in transitions.items():
            nodes[state][symbol] = _string_list(destinations, f'Transition {state!r} on {symbol!r}')

    return RawNfa(
        start=data['start'],
        alphabet=_string_list(data['alphabet'], 'alphabet'),
        final_states=_string_list(data['final_states'], 'final_states'),
        nodes=nodes,
    )


def dfa_from_json(data: Any) -> RawDfa:
    """
    Decodes a DFA document. Each symbol maps to a single destination.

    Raises:
        MalformedAutomatonError: If the document does not have the DFA shape
    """
    _check_envelope(data)

    for state, transitions in data['nodes'].items():
        for symbol, destination in transitions.items():
            if not isinstance(destination, str):
                raise MalformedAutomatonError(
                    f'Transition {state!r} on {symbol!r} must be a single state'
                )

    return RawDfa(
        start=data['start'],
        alphabet=_string_list(data['alphabet'], 'alphabet'),
        final_states=_string_list(data['final_states'], 'final_states'),
        nodes={state: dict(transitions) for state, transitions in data['nodes'].items()},
    )


def dfa_to_json(dfa: Dfa) -> Dict:
    """
    Encodes a DFA document, rendering composite states by display name.
    Lists are sorted so equal automata always encode identically.

    Raises:
        StateNameCollisionError: If two distinct states render to the same name
    """
    names: Dict[Hashable, str] = {}
    seen: Set[str] = set()
    for state in sorted_states(dfa.nodes):
        name = state_name(state)
        if name in seen:
            raise StateNameCollisionError(name)
        seen.add(name)
        names[state] = name

    return {
        'start': names[dfa.start],
        'alphabet': sorted(dfa.alphabet),
        'final_states': sorted(names[state] for state in dfa.final_states),
        'nodes': {
            names[state]: {
                symbol: names[dfa.nodes[state][symbol]]
                for symbol in sorted(dfa.nodes[state])
            }
            for state in sorted_states(dfa.nodes)
        },
    }


def nfa_to_json(nfa: Union[RawNfa, VerifiedNfa]) -> Dict:
    """Encodes an NFA document with sorted lists."""
    return {
        'start': nfa.start,
        'alphabet': sorted(nfa.alphabet),
        'final_states': sorted(nfa.final_states),
        'nodes': {
            state: {
                symbol: sorted(nfa.nodes[state][symbol])
                for symbol in sorted(nfa.nodes[state])
            }
            for state in sorted(nfa.nodes)
        },
    }

import logging
from typing import Dict, FrozenSet, Hashable, List, Optional, Set
from collections import defaultdict, deque

from .automata import Dfa, MergedState, RawNfa, StateSet, VerifiedNfa, sorted_states
from .exceptions import AutomatonTooLargeError
from .fsa_validation import validate_nfa

logger = logging.getLogger(__name__)


class _Sink:
    """Non-accepting trap state standing in for missing DFA transitions during minimisation."""

    def __str__(self):
        return '<sink>'

    def __repr__(self):
        return '_SINK'


_SINK = _Sink()


def nfa_to_dfa(nfa: VerifiedNfa, max_states: Optional[int] = None) -> Dfa:
    """
    Converts a validated NFA to a DFA using the subset construction algorithm.

    Each DFA state is a `StateSet` of the NFA states reachable together. The
    empty configuration (display name '') is the dead state: it is created
    the first time some configuration has no move on a symbol, and loops to
    itself on every symbol, so the resulting DFA is total.

    Args:
        nfa (VerifiedNfa): The NFA returned by `validate_nfa`
        max_states (int, optional): Most configurations to build before giving up

    Returns:
        Dfa: A total DFA accepting the same language, starting at {nfa.start}

    Raises:
        TypeError: If handed anything other than a `VerifiedNfa`
        AutomatonTooLargeError: If more than `max_states` configurations are reachable
    """
    if not isinstance(nfa, VerifiedNfa):
        raise TypeError("Subset construction requires a validated NFA, call validate_nfa first")

    alphabet = sorted(nfa.alphabet)

    def move(configuration: StateSet, symbol: str) -> StateSet:
        """Compute all NFA states reachable from the configuration on the symbol"""
        targets: Set[str] = set()
        for state in configuration:
            targets.update(nfa.nodes[state].get(symbol, ()))
        return StateSet(targets)

    start = StateSet({nfa.start})
    queue = deque([start])
    queued: Set[StateSet] = {start}

    dfa_nodes: Dict[StateSet, Dict[str, StateSet]] = {}
    final_states: Set[StateSet] = set()

    while queue:
        configuration = queue.popleft()

        # The same configuration can be reached along several paths
        if configuration in dfa_nodes:
            continue

        transitions = {}
        for symbol in alphabet:
            destination = move(configuration, symbol)
            if destination not in dfa_nodes and destination not in queued:
                queued.add(destination)
                if max_states is not None and len(queued) > max_states:
                    raise AutomatonTooLargeError(len(queued), max_states, what='Determinised DFA')
                queue.append(destination)
            transitions[symbol] = destination

        if configuration & nfa.final_states:
            final_states.add(configuration)

        dfa_nodes[configuration] = transitions

    assert all(
        destination in dfa_nodes
        for transitions in dfa_nodes.values()
        for destination in transitions.values()
    ), "subset construction left a destination without a node"

    logger.debug("Determinised NFA with %d states into DFA with %d states",
                 len(nfa.nodes), len(dfa_nodes))

    return Dfa(
        start=start,
        alphabet=nfa.alphabet,
        final_states=frozenset(final_states),
        nodes=dfa_nodes,
    )


def _complete_nodes(dfa: Dfa) -> Dict[Hashable, Dict[str, Hashable]]:
    """
    Copies the DFA's transition table, routing every missing transition to
    the sink. The sink is only added when some transition is missing.

    Args:
        dfa (Dfa): The DFA to complete

    Returns:
        Dict: A total transition table, possibly including `_SINK`
    """
    nodes = {state: dict(transitions) for state, transitions in dfa.nodes.items()}
    if dfa.is_total():
        return nodes

    for transitions in nodes.values():
        for symbol in dfa.alphabet:
            transitions.setdefault(symbol, _SINK)
    nodes[_SINK] = {symbol: _SINK for symbol in dfa.alphabet}
    return nodes


def _equivalent_pairs(nodes: Dict[Hashable, Dict[str, Hashable]], alphabet: List[str],
                      final_states: FrozenSet[Hashable]) -> Set[FrozenSet[Hashable]]:
    """
    Finds every pair of equivalent states with the table-filling algorithm.

    Pairs where exactly one state is final are distinguishable from the start.
    Distinguishability is then propagated backwards: if (p, q) is
    distinguishable and p' -> p, q' -> q on the same symbol, (p', q') is too.
    Whatever is never marked is equivalent.

    Args:
        nodes: A total transition table
        alphabet: The symbols, in a fixed order
        final_states: The accepting states

    Returns:
        Set[FrozenSet]: The unordered pairs of equivalent states
    """
    states = sorted_states(nodes)

    distinguishable = deque()
    candidates: Set[FrozenSet[Hashable]] = set()
    for i, first in enumerate(states):
        for second in states[i + 1:]:
            pair = frozenset((first, second))
            if (first in final_states) != (second in final_states):
                distinguishable.append(pair)
            else:
                candidates.add(pair)

    reverse = {symbol: defaultdict(set) for symbol in alphabet}
    for state, transitions in nodes.items():
        for symbol, target in transitions.items():
            reverse[symbol][target].add(state)

    while distinguishable:
        p, q = distinguishable.popleft()
        for symbol in alphabet:
            for p_prev in reverse[symbol].get(p, ()):
                for q_prev in reverse[symbol].get(q, ()):
                    pair = frozenset((p_prev, q_prev))
                    if pair in candidates:
                        candidates.remove(pair)
                        distinguishable.append(pair)

    return candidates


def minimise_dfa(dfa: Dfa) -> Dfa:
    """
    Minimises a DFA by collapsing equivalent states.

    Every state of the result is a `MergedState` holding the original states
    it replaces; an original state with no equivalent becomes a singleton and
    keeps its display name. Within a class, the state whose display name
    sorts first absorbs the others. Missing transitions behave as moves to a
    non-accepting trap and stay missing in the result.

    Args:
        dfa (Dfa): The DFA to minimise

    Returns:
        Dfa: A new DFA with no two equivalent states, accepting the same language

    Raises:
        TypeError: If handed anything other than a `Dfa`
    """
    if not isinstance(dfa, Dfa):
        raise TypeError("Minimisation requires a DFA")

    nodes = _complete_nodes(dfa)
    alphabet = sorted(dfa.alphabet)
    equivalent = _equivalent_pairs(nodes, alphabet, dfa.final_states)

    # Class of each state; None for a sink that is equivalent to no real state
    class_of: Dict[Hashable, Optional[MergedState]] = {}
    states = sorted_states(nodes)
    for left in states:
        if left in class_of:
            continue
        members = [left] + [
            right for right in states
            if right not in class_of and right != left and frozenset((left, right)) in equivalent
        ]
        merged = MergedState(member for member in members if member is not _SINK)
        for member in members:
            class_of[member] = merged or None

    minimal_nodes: Dict[MergedState, Dict[str, MergedState]] = {}
    for state in states:
        merged = class_of[state]
        if state is _SINK or merged is None or merged in minimal_nodes:
            continue
        minimal_nodes[merged] = {
            symbol: class_of[target]
            for symbol, target in nodes[state].items()
            if class_of[target] is not None
        }

    logger.debug("Minimised DFA from %d to %d states", len(dfa.nodes), len(minimal_nodes))

    return Dfa(
        start=class_of[dfa.start],
        alphabet=dfa.alphabet,
        final_states=frozenset(class_of[state] for state in dfa.final_states),
        nodes=minimal_nodes,
    )


def minimise_nfa(raw: RawNfa, max_dfa_states: Optional[int] = None) -> Dfa:
    """
    Runs the whole pipeline: validation, subset construction, minimisation.

    Args:
        raw (RawNfa): The NFA as supplied by the client
        max_dfa_states (int, optional): Cap on configurations built by subset construction

    Returns:
        Dfa: The minimal DFA accepting the NFA's language

    Raises:
        ValidationError: If the NFA is not well formed
        AutomatonTooLargeError: If subset construction exceeds `max_dfa_states`
    """
    return minimise_dfa(nfa_to_dfa(validate_nfa(raw), max_states=max_dfa_states))

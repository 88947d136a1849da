from typing import Dict, Hashable, List, Sequence, Set, Union

from .automata import Dfa, RawNfa, VerifiedNfa, state_name


def simulate_dfa(dfa: Dfa, word: Sequence[str]) -> Dict:
    """
    Runs a DFA on a word, one symbol at a time.

    Args:
        dfa: The DFA to run
        word: The input, as a sequence of alphabet symbols

    Returns:
        A dictionary with:
        {
            'accepted': bool,
            'path': [(state, symbol, next_state), ...],  # Display names, up to rejection
            'rejection_reason': str or None
        }
    """
    current_state = dfa.start
    path = []

    for symbol in word:
        if symbol not in dfa.alphabet:
            return {
                'accepted': False,
                'path': path,
                'rejection_reason': f"Symbol '{symbol}' not in alphabet",
            }

        # A missing transition rejects the rest of the word
        if symbol not in dfa.nodes[current_state]:
            return {
                'accepted': False,
                'path': path,
                'rejection_reason': f"No transition defined for symbol '{symbol}' "
                                    f"from state '{state_name(current_state)}'",
            }

        next_state = dfa.nodes[current_state][symbol]
        path.append((state_name(current_state), symbol, state_name(next_state)))
        current_state = next_state

    if current_state in dfa.final_states:
        return {'accepted': True, 'path': path, 'rejection_reason': None}

    return {
        'accepted': False,
        'path': path,
        'rejection_reason': f"Final state '{state_name(current_state)}' is not an accepting state",
    }


def nfa_states_after(nfa: Union[RawNfa, VerifiedNfa], word: Sequence[str]) -> Set[str]:
    """Computes the set of NFA states reachable from the start on the word."""
    current: Set[Hashable] = {nfa.start}
    for symbol in word:
        current = {
            target
            for state in current
            for target in nfa.nodes.get(state, {}).get(symbol, ())
        }
        if not current:
            break
    return current


def nfa_accepts(nfa: Union[RawNfa, VerifiedNfa], word: Sequence[str]) -> bool:
    return bool(nfa_states_after(nfa, word) & nfa.final_states)


def dfa_accepts(dfa: Dfa, word: Sequence[str]) -> bool:
    return simulate_dfa(dfa, word)['accepted']


def words_up_to(alphabet: Sequence[str], max_length: int) -> List[List[str]]:
    """Every word over the alphabet of length 0 to max_length, shortest first."""
    words = [[]]
    frontier = [[]]
    for _ in range(max_length):
        frontier = [word + [symbol] for word in frontier for symbol in sorted(alphabet)]
        words.extend(frontier)
    return words

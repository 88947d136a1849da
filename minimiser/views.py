import json
import logging

from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from .exceptions import ValidationError
from .fsa_serialisation import dfa_from_json, dfa_to_json, nfa_from_json
from .fsa_simulation import nfa_accepts, simulate_dfa
from .fsa_transformations import minimise_dfa, minimise_nfa, nfa_to_dfa
from .fsa_validation import check_size, validate_dfa, validate_nfa

logger = logging.getLogger(__name__)


def _client_error(error: ValueError) -> JsonResponse:
    """Builds the 400 response for a request the client got wrong."""
    logger.warning("Rejected automaton: %s", error)
    body = {'error': str(error)}
    if isinstance(error, ValidationError):
        body['kind'] = error.kind
        body['value'] = error.value
    return JsonResponse(body, status=400)


def _server_error(error: Exception) -> JsonResponse:
    logger.exception("Unexpected failure while processing automaton")
    return JsonResponse({'error': f'Server error: {str(error)}'}, status=500)


@csrf_exempt
@require_POST
def minimise_nfa_view(request):
    """
    Django view to handle NFA minimisation requests: validation, subset
    construction and minimisation in one go.

    Expects a POST request whose JSON body is an NFA document.

    Returns the minimal DFA document.
    """
    try:
        raw = nfa_from_json(json.loads(request.body))
        check_size(raw, settings.MINIMISER_MAX_STATES)

        minimal = minimise_nfa(raw, max_dfa_states=settings.MINIMISER_MAX_DFA_STATES)

        logger.info("Minimised NFA with %d states to DFA with %d states",
                    len(raw.nodes), len(minimal.nodes))
        return JsonResponse(dfa_to_json(minimal))

    except ValueError as e:
        return _client_error(e)
    except Exception as e:
        return _server_error(e)


@csrf_exempt
@require_POST
def convert_nfa_to_dfa(request):
    """
    Django view to handle NFA to DFA conversion requests.

    Expects a POST request whose JSON body is an NFA document.

    Returns the determinised (not minimised) DFA document.
    """
    try:
        raw = nfa_from_json(json.loads(request.body))
        check_size(raw, settings.MINIMISER_MAX_STATES)

        dfa = nfa_to_dfa(validate_nfa(raw), max_states=settings.MINIMISER_MAX_DFA_STATES)

        logger.info("Converted NFA with %d states to DFA with %d states",
                    len(raw.nodes), len(dfa.nodes))
        return JsonResponse(dfa_to_json(dfa))

    except ValueError as e:
        return _client_error(e)
    except Exception as e:
        return _server_error(e)


@csrf_exempt
@require_POST
def min_dfa(request):
    """
    Django view to handle DFA minimisation requests.

    Expects a POST request whose JSON body is a DFA document (each symbol maps
    to a single destination state).

    Returns the minimal DFA document.
    """
    try:
        raw = dfa_from_json(json.loads(request.body))
        check_size(raw, settings.MINIMISER_MAX_DFA_STATES)

        minimal = minimise_dfa(validate_dfa(raw))

        logger.info("Minimised DFA with %d states to %d states",
                    len(raw.nodes), len(minimal.nodes))
        return JsonResponse(dfa_to_json(minimal))

    except ValueError as e:
        return _client_error(e)
    except Exception as e:
        return _server_error(e)


@csrf_exempt
@require_POST
def check_word(request):
    """
    Django view to run a word through an NFA and through its minimal DFA.

    Expects a POST request with a JSON body containing:
    - fsa: The NFA document
    - input: The word, as a list of alphabet symbols

    Returns a JSON response with both verdicts and the DFA's execution path.
    """
    try:
        data = json.loads(request.body)
        if not isinstance(data, dict) or 'fsa' not in data:
            return JsonResponse({'error': 'Missing FSA definition'}, status=400)

        word = data.get('input', [])
        if not isinstance(word, list) or not all(isinstance(symbol, str) for symbol in word):
            return JsonResponse({'error': 'input must be a list of symbols'}, status=400)

        raw = nfa_from_json(data['fsa'])
        check_size(raw, settings.MINIMISER_MAX_STATES)

        nfa = validate_nfa(raw)
        dfa = nfa_to_dfa(nfa, max_states=settings.MINIMISER_MAX_DFA_STATES)
        result = simulate_dfa(minimise_dfa(dfa), word)

        return JsonResponse({
            'accepted': result['accepted'],
            'nfa_accepted': nfa_accepts(nfa, word),
            'path': result['path'],
            'rejection_reason': result['rejection_reason'],
        })

    except ValueError as e:
        return _client_error(e)
    except Exception as e:
        return _server_error(e)

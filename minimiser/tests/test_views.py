import json
from django.test import TestCase, Client, override_settings
from unittest.mock import patch


class FSAViewTestCase(TestCase):
    """Base test case with common automaton documents and utilities"""

    def setUp(self):
        self.client = Client()

        self.sample_nfa = {
            'start': '1',
            'alphabet': ['a', 'b'],
            'final_states': ['3'],
            'nodes': {
                '1': {'a': ['1', '2'], 'b': ['1']},
                '2': {'a': ['3'], 'b': ['3']},
                '3': {'a': ['1'], 'b': ['2']},
            },
        }

        self.sample_dfa = {
            'start': '1',
            'alphabet': ['a', 'b'],
            'final_states': ['2', '4'],
            'nodes': {
                '1': {'a': '2', 'b': '3'},
                '2': {},
                '3': {'a': '4', 'b': '1'},
                '4': {},
            },
        }

    def post_json(self, url, data):
        """Helper method to send JSON POST requests"""
        return self.client.post(
            url,
            data=json.dumps(data),
            content_type='application/json'
        )


class MinimiseNfaViewTests(FSAViewTestCase):
    """Tests for the full pipeline endpoint"""

    def test_minimise_nfa(self):
        response = self.post_json('/api/minimise-nfa/', self.sample_nfa)

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['start'], '1')
        self.assertEqual(data['alphabet'], ['a', 'b'])
        self.assertEqual(set(data['nodes']), {'1', '1 + 2', '1 + 2 + 3', '1 + 3'})
        self.assertEqual(data['final_states'], ['1 + 2 + 3', '1 + 3'])
        for transitions in data['nodes'].values():
            self.assertEqual(set(transitions), {'a', 'b'})
            self.assertTrue(all(isinstance(target, str) for target in transitions.values()))

    def test_merged_states_in_response(self):
        nfa = {
            'start': 's',
            'alphabet': ['a', 'b'],
            'final_states': ['f'],
            'nodes': {
                's': {'a': ['x1'], 'b': ['y1']},
                'x1': {'a': ['f'], 'b': ['s']},
                'y1': {'a': ['f'], 'b': ['s']},
                'f': {'a': ['f'], 'b': ['f']},
            },
        }
        response = self.post_json('/api/minimise-nfa/', nfa)

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['nodes'], {
            's': {'a': 'x1 | y1', 'b': 'x1 | y1'},
            'x1 | y1': {'a': 'f', 'b': 's'},
            'f': {'a': 'f', 'b': 'f'},
        })

    def test_unknown_final_state(self):
        """An undeclared final state is a client error naming the state"""
        nfa = dict(self.sample_nfa, final_states=['3', '4'])

        with patch('minimiser.fsa_transformations.nfa_to_dfa') as mock_nfa_to_dfa:
            response = self.post_json('/api/minimise-nfa/', nfa)

        self.assertEqual(response.status_code, 400)
        data = response.json()
        self.assertEqual(data['kind'], 'unknown_state')
        self.assertEqual(data['value'], '4')
        self.assertIn('4', data['error'])
        mock_nfa_to_dfa.assert_not_called()

    def test_unknown_symbol(self):
        nfa = json.loads(json.dumps(self.sample_nfa))
        nfa['nodes']['1']['c'] = ['1']

        response = self.post_json('/api/minimise-nfa/', nfa)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['kind'], 'unknown_symbol')
        self.assertEqual(response.json()['value'], 'c')

    def test_missing_key(self):
        nfa = dict(self.sample_nfa)
        del nfa['nodes']

        response = self.post_json('/api/minimise-nfa/', nfa)

        self.assertEqual(response.status_code, 400)
        self.assertIn('Missing required key: nodes', response.json()['error'])

    def test_malformed_json(self):
        response = self.client.post(
            '/api/minimise-nfa/',
            data='{"start": "1", "nodes"',
            content_type='application/json'
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn('error', response.json())

    @override_settings(MINIMISER_MAX_STATES=2)
    def test_too_many_states(self):
        response = self.post_json('/api/minimise-nfa/', self.sample_nfa)

        self.assertEqual(response.status_code, 400)
        self.assertIn('limit is 2', response.json()['error'])

    def test_get_not_allowed(self):
        response = self.client.get('/api/minimise-nfa/')
        self.assertEqual(response.status_code, 405)

    @patch('minimiser.views.minimise_nfa')
    def test_unexpected_failure(self, mock_minimise):
        mock_minimise.side_effect = RuntimeError('boom')

        with self.assertLogs('minimiser.views', level='ERROR'):
            response = self.post_json('/api/minimise-nfa/', self.sample_nfa)

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()['error'], 'Server error: boom')


class NfaToDfaViewTests(FSAViewTestCase):
    """Tests for the subset construction endpoint"""

    def test_nfa_to_dfa(self):
        nfa = dict(self.sample_nfa, nodes={
            '1': {'a': ['2']},
            '2': {},
        }, final_states=['2'])

        response = self.post_json('/api/nfa-to-dfa/', nfa)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {
            'start': '1',
            'alphabet': ['a', 'b'],
            'final_states': ['2'],
            'nodes': {
                '': {'a': '', 'b': ''},
                '1': {'a': '2', 'b': ''},
                '2': {'a': '', 'b': ''},
            },
        })

    def test_invalid_start_state(self):
        response = self.post_json('/api/nfa-to-dfa/', dict(self.sample_nfa, start='9'))

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['value'], '9')


class MinimiseDfaViewTests(FSAViewTestCase):
    """Tests for the DFA minimisation endpoint"""

    def test_minimise_dfa(self):
        response = self.post_json('/api/minimise-dfa/', self.sample_dfa)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {
            'start': '1 | 3',
            'alphabet': ['a', 'b'],
            'final_states': ['2 | 4'],
            'nodes': {
                '1 | 3': {'a': '2 | 4', 'b': '1 | 3'},
                '2 | 4': {},
            },
        })

    def test_nfa_document_rejected(self):
        response = self.post_json('/api/minimise-dfa/', self.sample_nfa)

        self.assertEqual(response.status_code, 400)
        self.assertIn('single state', response.json()['error'])

    def test_unknown_destination(self):
        dfa = json.loads(json.dumps(self.sample_dfa))
        dfa['nodes']['2'] = {'a': '5'}

        response = self.post_json('/api/minimise-dfa/', dfa)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['kind'], 'unknown_state')
        self.assertEqual(response.json()['value'], '5')


class CheckWordViewTests(FSAViewTestCase):
    """Tests for the word checking endpoint"""

    def test_accepted_word(self):
        response = self.post_json('/api/check-word/', {'fsa': self.sample_nfa, 'input': ['a', 'b']})

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data['accepted'])
        self.assertTrue(data['nfa_accepted'])
        self.assertEqual(data['path'], [['1', 'a', '1 + 2'], ['1 + 2', 'b', '1 + 3']])
        self.assertIsNone(data['rejection_reason'])

    def test_rejected_word(self):
        response = self.post_json('/api/check-word/', {'fsa': self.sample_nfa, 'input': ['b']})

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertFalse(data['accepted'])
        self.assertFalse(data['nfa_accepted'])
        self.assertIn('not an accepting state', data['rejection_reason'])

    def test_missing_fsa(self):
        response = self.post_json('/api/check-word/', {'input': ['a']})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'Missing FSA definition')

    def test_input_must_be_symbol_list(self):
        response = self.post_json('/api/check-word/', {'fsa': self.sample_nfa, 'input': 'ab'})

        self.assertEqual(response.status_code, 400)
        self.assertIn('list of symbols', response.json()['error'])


class BoundaryLimitViewTests(FSAViewTestCase):
    """Tests for requests the service must refuse rather than mis-answer or hang on"""

    def nth_from_end_document(self, n):
        nodes = {'q0': {'a': ['q0', 'q1'], 'b': ['q0']}}
        for i in range(1, n):
            nodes[f'q{i}'] = {'a': [f'q{i + 1}'], 'b': [f'q{i + 1}']}
        nodes[f'q{n}'] = {}
        return {
            'start': 'q0',
            'alphabet': ['a', 'b'],
            'final_states': [f'q{n}'],
            'nodes': nodes,
        }

    def test_colliding_state_names_are_refused(self):
        nfa = {
            'start': 's',
            'alphabet': ['a', 'b'],
            'final_states': ['1'],
            'nodes': {
                's': {'a': ['1', '2'], 'b': ['1 + 2']},
                '1': {},
                '2': {},
                '1 + 2': {},
            },
        }

        response = self.post_json('/api/nfa-to-dfa/', nfa)

        self.assertEqual(response.status_code, 400)
        self.assertIn("'1 + 2'", response.json()['error'])

    def test_blowup_within_nfa_limit_is_refused_with_defaults(self):
        """12 NFA states pass the NFA cap, but 2048 DFA states exceed the DFA cap"""
        document = self.nth_from_end_document(11)
        self.assertEqual(len(document['nodes']), 12)

        with patch('minimiser.fsa_transformations.minimise_dfa') as mock_minimise_dfa:
            response = self.post_json('/api/minimise-nfa/', document)

        self.assertEqual(response.status_code, 400)
        self.assertIn('limit is 256', response.json()['error'])
        mock_minimise_dfa.assert_not_called()

    @override_settings(MINIMISER_MAX_DFA_STATES=16)
    def test_dfa_limit_applies_to_every_nfa_endpoint(self):
        document = self.nth_from_end_document(5)

        for url in ['/api/minimise-nfa/', '/api/nfa-to-dfa/']:
            response = self.post_json(url, document)
            self.assertEqual(response.status_code, 400, url)
            self.assertIn('Determinised DFA has 17 states', response.json()['error'])

        response = self.post_json('/api/check-word/', {'fsa': document, 'input': ['a']})
        self.assertEqual(response.status_code, 400)

    def test_nfa_over_default_limit(self):
        response = self.post_json('/api/minimise-nfa/', self.nth_from_end_document(12))

        self.assertEqual(response.status_code, 400)
        self.assertIn('Automaton has 13 states, the limit is 12', response.json()['error'])

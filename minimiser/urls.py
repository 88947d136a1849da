from django.urls import path
from . import views

urlpatterns = [
    # Full pipeline: NFA in, minimal DFA out
    path('api/minimise-nfa/', views.minimise_nfa_view, name='minimise_nfa'),

    # Individual pipeline stages
    path('api/nfa-to-dfa/', views.convert_nfa_to_dfa, name='nfa_to_dfa'),
    path('api/minimise-dfa/', views.min_dfa, name='minimise_dfa'),

    # Run a word through an NFA and its minimal DFA
    path('api/check-word/', views.check_word, name='check_word'),
]

from django.apps import AppConfig


class MinimiserConfig(AppConfig):
    name = 'minimiser'
    verbose_name = 'NFA minimiser'

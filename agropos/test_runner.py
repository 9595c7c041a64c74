"""Test runner used by ``manage.py test``."""

from django.test.runner import DiscoverRunner


class NonInteractiveDiscoverRunner(DiscoverRunner):
    """Discover runner that never prompts, so a stale test database is replaced."""

    def __init__(self, *args, **kwargs):
        kwargs["interactive"] = False
        super().__init__(*args, **kwargs)

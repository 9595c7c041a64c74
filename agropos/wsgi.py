"""
WSGI config for the agropos project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "agropos.settings")

application = get_wsgi_application()

"""
WSGI config for the broodstock sales dashboard API.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'broodstock.config.settings')

application = get_wsgi_application()

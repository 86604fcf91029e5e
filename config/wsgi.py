# WSGI (Web Server Gateway Interface) configuration
#
# Used by production servers like Gunicorn or uWSGI for plain HTTP.
# The live deal board needs WebSockets, so run the ASGI app (see asgi.py)
# when the board should update in real time.
#
# Run: gunicorn config.wsgi:application --bind 0.0.0.0:8000 --workers 4
# ==============================================================================

import os
from django.core.wsgi import get_wsgi_application

# Points to config/settings.py
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

application = get_wsgi_application()

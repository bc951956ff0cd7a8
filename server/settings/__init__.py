"""Django settings for the server.

Settings are assembled from components with django-split-settings.
The environment file is picked by the DJANGO_ENV variable
('development' by default).
"""

from os import environ

import django_stubs_ext
from split_settings.tools import include, optional

# Runtime support for generic annotations like ModelAdmin[File]
django_stubs_ext.monkeypatch()

environ.setdefault('DJANGO_ENV', 'development')
_ENV = environ['DJANGO_ENV']

_base_settings = (
    'components/common.py',
    'components/logging.py',
    'components/storages.py',
    'components/sharing.py',
    # Select the right env:
    'environments/{0}.py'.format(_ENV),
    # Optionally override some settings:
    optional('environments/local.py'),
)

include(*_base_settings)

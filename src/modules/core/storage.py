"""Storage backend selection.

``settings.STORAGE_BACKEND`` decides whether orders and discount codes go to
the relational database (``database``) or to process-local dictionaries
(``memory``).  Each module exposes a ``get_*_repository()`` factory that
consults :func:`use_memory_storage`.
"""

from __future__ import annotations

from django.conf import settings

DATABASE = "database"
MEMORY = "memory"


def storage_backend() -> str:
    return getattr(settings, "STORAGE_BACKEND", DATABASE)


def use_memory_storage() -> bool:
    return storage_backend() == MEMORY

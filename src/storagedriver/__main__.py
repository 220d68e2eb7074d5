"""Allow ``python -m storagedriver``."""

from .cli import app

app()

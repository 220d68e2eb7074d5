"""Reference storage drivers."""

from .fs import FilesystemDriver
from .inmemory import InMemoryDriver

__all__ = ["FilesystemDriver", "InMemoryDriver"]

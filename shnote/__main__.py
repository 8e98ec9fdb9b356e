"""Allow `python -m shnote`."""

from .cli import entry_point

entry_point()

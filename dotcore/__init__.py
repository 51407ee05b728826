"""Building blocks for a dotfile manager: source-name attributes, paths, entry states, archive and recording systems, persistent state, formats and encryption."""

__version__ = "0.1.0"
"""Browse Claude Code conversation history and saved plans."""

__version__ = "0.1.0"

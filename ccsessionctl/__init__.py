"""Browse, search and clean up Claude Code session transcripts."""

__version__ = "0.3.0"

"""Import Notion databases into an Obsidian vault."""

__version__ = "0.1.0"

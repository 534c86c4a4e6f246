"""caliber: a markdown journal and task manager for the terminal."""

__version__ = "0.1.0"

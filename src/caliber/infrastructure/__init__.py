"""Infrastructure layer: journal file storage.

This layer depends on the domain layer for parsing and rendering.
It must never import from services, commands, or output.
"""

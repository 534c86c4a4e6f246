"""Domain layer: line model, dates, filters, projection, tags, hints.

This layer depends only on the standard library.
It must never import from services, infrastructure, commands, or config.
"""

"""Domain layer — type descriptors, field trees, relations, identifiers.

This layer depends only on stdlib.
It must never import from services, infrastructure, commands, or config.
"""

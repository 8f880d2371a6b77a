"""Service layer — resolution cache, loader, mapper, introspection.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""

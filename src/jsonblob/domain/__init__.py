"""Domain layer: codec, field paths, and error types.

This layer depends only on stdlib and pydantic.
It must never import from the field wrapper, infrastructure, or config.
"""

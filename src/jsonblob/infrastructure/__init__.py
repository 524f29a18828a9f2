"""Infrastructure layer: SQLAlchemy column type and engine setup.

This layer depends on the field wrapper and third-party libs (SQLAlchemy).
It must never import from the examples package.
"""

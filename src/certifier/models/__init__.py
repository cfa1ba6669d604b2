# src/certifier/models/__init__.py

# Centralise model imports so SQLModel's metadata knows every table before
# create_all() or an Alembic autogenerate runs.
from .intern import Intern

__all__ = [
    "Intern",
]

"""
Application package initializer.

The application is organised in layers: ``rpc`` (schemas, procedures,
router), ``repositories`` (storage), ``services`` (business rules) and
``api`` (procedure tables and the HTTP transport).  ``main`` wires them
together.
"""

from .main import app  # noqa: F401

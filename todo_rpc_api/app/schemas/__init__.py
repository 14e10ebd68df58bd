"""
Pydantic schema definitions for procedure inputs and outputs.

Each resource kind (users, todos) defines its own models.  The read
models double as the entities stored by the repositories; input
models never carry an id.
"""

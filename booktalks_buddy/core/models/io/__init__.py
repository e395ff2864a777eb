"""
Request and response schemas of the HTTP API.

Schemas are plain pydantic models. Read models are built from entity rows
with ``model_validate(row)`` (``from_attributes``).
"""

"""
Domain errors shared by services and endpoints.

Services raise ``NotFoundError`` for missing rows and plain
``ValueError`` for payloads that are well-formed but inconsistent
with stored data.  Endpoints translate them into 404 and 422
responses respectively.
"""

from typing import Optional


class NotFoundError(ValueError):
    """A referenced row does not exist."""

    def __init__(self, object_type: str, object_id: Optional[int]) -> None:
        super().__init__(f"{object_type.capitalize()} {object_id} not found")
        self.object_type = object_type
        self.object_id = object_id

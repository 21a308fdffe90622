"""Inputs shared by several procedures."""

from pydantic import BaseModel


class IdInput(BaseModel):
    """Input of the delete procedures: {id}."""

    id: int

"""Schema for accounts module."""

from ninja import ModelSchema
from pydantic import UUID4

from .models import GatepassUser


class GatepassUserSchema(ModelSchema):
    id: UUID4
    display_name: str

    class Meta:
        model = GatepassUser
        fields = ["email", "preferred_name", "first_name", "last_name", "language"]


class MinimalUserSchema(ModelSchema):
    id: UUID4
    display_name: str

    class Meta:
        model = GatepassUser
        fields = ["preferred_name"]

"""
Shared pieces for domain models
"""
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, PlainSerializer
from typing import Annotated

# Decimal in memory, float in JSON responses
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class DomainModel(BaseModel):
    """Base for models built from ORM objects"""

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        """JSON-compatible dict (Decimal -> float, datetime -> ISO string)"""
        return self.model_dump(mode="json")

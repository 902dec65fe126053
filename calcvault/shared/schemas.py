"""
Base schemas for the JSON API.

Python code stays snake_case; request and response bodies are camelCase
(userId, mimeType, subscriptionType), the shape the vault client speaks.
"""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Request bodies. Accepts camelCase or snake_case."""
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class CamelORMModel(BaseModel):
    """Response bodies read straight from SQLAlchemy rows."""
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }

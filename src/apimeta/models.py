"""Base Pydantic models for apimeta.

This module provides the base model class that all apimeta Pydantic models
inherit from. It establishes consistent configuration across all models:

- Strict field validation (no extra fields allowed)
- Immutable instances so they can be shared between threads

Example:
    >>> from apimeta.models import ApiMetaBaseModel
    >>>
    >>> class MyModel(ApiMetaBaseModel):
    ...     name: str
    >>>
    >>> MyModel(name="test").model_dump()
    {'name': 'test'}
"""

from pydantic import BaseModel, ConfigDict


class ApiMetaBaseModel(BaseModel):
    """Base model for all apimeta Pydantic models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

"""Shared base model used across grid API domain models."""

from pydantic import BaseModel


# --- Base model ---


class GridBase(BaseModel):
    """Base model with common configuration for all grid API Pydantic models."""

    model_config = {
        "populate_by_name": True,
        "protected_namespaces": (),
    }

"""Database models."""
from relmap.infra.db.models.person import InteractionModel, PersonModel

__all__ = ["PersonModel", "InteractionModel"]

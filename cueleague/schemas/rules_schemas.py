from pydantic import BaseModel, Field
from typing import Optional

class RulesConfig(BaseModel):
    """Per-tournament scoring and qualification parameters."""
    win_points: int = Field(3, ge=0)
    loss_points: int = Field(1, ge=0)
    min_games: int = Field(32, ge=0, description="Games needed to be eligible for a qualifying tier")
    top_slots: int = Field(8, ge=0)
    replacement_slots: int = Field(2, ge=0)

    class Config:
        from_attributes = True

# Fields the break-glass override may touch
OVERRIDABLE_FIELDS = {"min_games", "top_slots"}

class RulesOverride(BaseModel):
    min_games: Optional[int] = Field(None, ge=0)
    top_slots: Optional[int] = Field(None, ge=0)

    class Config:
        # Unknown fields are kept so the service can reject them explicitly
        extra = "allow"

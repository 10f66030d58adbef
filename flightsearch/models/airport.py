"""
Airport-related Pydantic models for the flight search application.

This module contains the immutable airport record handed out by the
airport store and carried in the published search state.
"""

from pydantic import BaseModel, Field, ConfigDict


class AirportModel(BaseModel):
    """Airport information model."""
    model_config = ConfigDict(from_attributes=True, frozen=True)
    
    id: int
    iata_code: str = Field(..., min_length=1, max_length=3, description="IATA airport code")
    name: str = Field(..., description="Airport name")
    passengers: int = Field(default=0, ge=0, description="Annual passenger volume used for ranking")

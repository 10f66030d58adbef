"""
Route card models for the flight search application.

A route card is the flattened view of a departure/destination pair with
resolved airport names, ready for any presentation layer to render.
"""

from pydantic import BaseModel, Field, ConfigDict


class RouteCardModel(BaseModel):
    """Departure/destination pair with display names and favorite flag."""
    model_config = ConfigDict(frozen=True)
    
    departure_code: str = Field(..., description="Departure IATA code")
    departure_name: str = Field(default="", description="Departure airport name, empty if unknown")
    destination_code: str = Field(..., description="Destination IATA code")
    destination_name: str = Field(default="", description="Destination airport name, empty if unknown")
    is_favorite: bool = Field(default=False, description="Whether the pair is a saved favorite")

"""
Favorite route models for the flight search application.
"""

from pydantic import BaseModel, Field, ConfigDict


class FavoriteRouteModel(BaseModel):
    """A saved departure to destination pair."""
    model_config = ConfigDict(from_attributes=True, frozen=True)
    
    id: int
    departure_code: str = Field(..., max_length=3, description="Departure IATA code")
    destination_code: str = Field(..., max_length=3, description="Destination IATA code")
    
    def matches(self, departure_code: str, destination_code: str) -> bool:
        return (
            self.departure_code == departure_code
            and self.destination_code == destination_code
        )

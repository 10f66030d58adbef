"""
Test suite for the Pydantic models.

Covers record validation, immutability, the derived display mode and the
route card helpers on SearchUiState.
"""

import pytest
from pydantic import ValidationError

from flightsearch.models import (
    AirportModel,
    DisplayMode,
    FavoriteRouteModel,
    RouteCardModel,
    SearchUiState,
)


@pytest.fixture
def muc():
    return AirportModel(id=1, iata_code="MUC", name="Munich Airport", passengers=37_036_000)


@pytest.fixture
def sfo():
    return AirportModel(id=2, iata_code="SFO", name="San Francisco International Airport", passengers=50_196_000)


@pytest.fixture
def lhr():
    return AirportModel(id=3, iata_code="LHR", name="London Heathrow Airport", passengers=79_183_000)


@pytest.fixture
def favorite():
    return FavoriteRouteModel(id=1, departure_code="MUC", destination_code="SFO")


class TestRecordModels:
    """Test cases for airport and favorite records."""

    def test_airport_rejects_long_code(self):
        """IATA codes longer than three characters are invalid."""
        with pytest.raises(ValidationError):
            AirportModel(id=1, iata_code="MUNI", name="Munich", passengers=1)

    def test_airport_rejects_negative_passengers(self):
        with pytest.raises(ValidationError):
            AirportModel(id=1, iata_code="MUC", name="Munich", passengers=-1)

    def test_airport_is_immutable(self, muc):
        """Airports are frozen once loaded."""
        with pytest.raises(ValidationError):
            muc.name = "Changed"

    def test_favorite_matches_exact_pair(self, favorite):
        assert favorite.matches("MUC", "SFO")
        assert not favorite.matches("SFO", "MUC")
        assert not favorite.matches("muc", "sfo")


class TestDisplayMode:
    """The four display modes and their precedence."""

    def test_default_state_is_idle(self):
        state = SearchUiState()
        assert state.showing_favorites is True
        assert state.display_mode is DisplayMode.IDLE

    def test_blank_query_with_favorites_shows_favorites(self, favorite):
        state = SearchUiState(search_query="   ", favorites=(favorite,))
        assert state.showing_favorites is True
        assert state.display_mode is DisplayMode.FAVORITES

    def test_typed_query_is_suggesting(self):
        state = SearchUiState(search_query="Mun")
        assert state.showing_favorites is False
        assert state.display_mode is DisplayMode.SUGGESTING

    def test_typed_query_without_results_is_still_suggesting(self, favorite):
        state = SearchUiState(search_query="zzz", favorites=(favorite,))
        assert state.display_mode is DisplayMode.SUGGESTING

    def test_selection_wins_over_favorites(self, muc, favorite):
        """A selected airport takes precedence even with a blank query."""
        state = SearchUiState(search_query="", selected_airport=muc, favorites=(favorite,))
        assert state.showing_favorites is False
        assert state.display_mode is DisplayMode.SELECTED

    @pytest.mark.parametrize("query,selected,has_favorites,expected", [
        ("", False, False, DisplayMode.IDLE),
        ("", False, True, DisplayMode.FAVORITES),
        (" ", False, True, DisplayMode.FAVORITES),
        ("M", False, False, DisplayMode.SUGGESTING),
        ("M", False, True, DisplayMode.SUGGESTING),
        ("", True, False, DisplayMode.SELECTED),
        ("", True, True, DisplayMode.SELECTED),
        ("MUC", True, True, DisplayMode.SELECTED),
    ])
    def test_exactly_one_mode_applies(self, muc, favorite, query, selected, has_favorites, expected):
        state = SearchUiState(
            search_query=query,
            selected_airport=muc if selected else None,
            favorites=(favorite,) if has_favorites else (),
        )
        assert state.display_mode is expected
        assert [m for m in DisplayMode if m is state.display_mode] == [expected]


class TestRouteCards:
    """Test cases for favorite and destination cards."""

    def test_favorite_cards_resolve_names(self, muc, sfo, favorite):
        state = SearchUiState(favorites=(favorite,), all_airports={"MUC": muc, "SFO": sfo})

        assert state.favorite_cards() == [
            RouteCardModel(
                departure_code="MUC",
                departure_name="Munich Airport",
                destination_code="SFO",
                destination_name="San Francisco International Airport",
                is_favorite=True,
            )
        ]

    def test_favorite_cards_with_unknown_airport(self, favorite):
        """Codes missing from all_airports resolve to an empty name."""
        card = SearchUiState(favorites=(favorite,)).favorite_cards()[0]
        assert card.departure_name == ""
        assert card.destination_name == ""

    def test_destination_cards_flag_favorites(self, muc, sfo, lhr, favorite):
        state = SearchUiState(
            search_query="MUC",
            selected_airport=muc,
            destinations=(lhr, sfo),
            favorites=(favorite,),
        )

        cards = state.destination_cards()
        assert [c.destination_code for c in cards] == ["LHR", "SFO"]
        assert [c.is_favorite for c in cards] == [False, True]
        assert all(c.departure_code == "MUC" for c in cards)

    def test_destination_cards_without_selection(self, lhr):
        assert SearchUiState(destinations=(lhr,)).destination_cards() == []

    def test_is_favorite_route(self, favorite):
        state = SearchUiState(favorites=(favorite,))
        assert state.is_favorite_route("MUC", "SFO")
        assert not state.is_favorite_route("MUC", "LHR")

"""
Tests for application wiring and the console front end.
"""

import pytest
import pytest_asyncio

from flightsearch.database import SAMPLE_AIRPORTS
from flightsearch.main import build_application, handle_line, render
from flightsearch.models import AirportModel, FavoriteRouteModel, SearchUiState
from flightsearch.stores import DatabasePreferenceStore
from flightsearch.utils.config import FlightSearchConfig

WAIT = 2.0

MUC = AirportModel(id=1, iata_code="MUC", name="Munich Airport", passengers=37_036_000)
SFO = AirportModel(id=2, iata_code="SFO", name="San Francisco International Airport", passengers=50_196_000)


@pytest_asyncio.fixture
async def app():
    """Application over an in-memory database seeded with sample airports."""
    application = build_application(FlightSearchConfig(database_url="sqlite:///:memory:"))
    yield application
    await application.close()


class TestRender:

    def test_idle_prompt(self):
        assert "Enter departure airport or city" in render(SearchUiState())

    def test_suggestions(self):
        text = render(SearchUiState(search_query="Mu", suggestions=(MUC,)))
        assert "[suggesting]" in text
        assert "MUC  Munich Airport" in text

    def test_no_matches(self):
        assert "(no matching airports)" in render(SearchUiState(search_query="zzz"))

    def test_selected_marks_favorites(self):
        state = SearchUiState(
            search_query="MUC",
            selected_airport=MUC,
            destinations=(SFO,),
            favorites=(FavoriteRouteModel(id=1, departure_code="MUC", destination_code="SFO"),),
        )
        text = render(state)
        assert "Flights from MUC Munich Airport:" in text
        assert " * SFO  San Francisco International Airport" in text

    def test_favorites(self):
        state = SearchUiState(
            favorites=(FavoriteRouteModel(id=1, departure_code="MUC", destination_code="SFO"),),
            all_airports={"MUC": MUC, "SFO": SFO},
        )
        text = render(state)
        assert "Favorite routes:" in text
        assert "MUC Munich Airport -> SFO San Francisco International Airport" in text


class TestBuildApplication:

    @pytest.mark.asyncio
    async def test_seeds_sample_airports(self, app):
        airports = await app.repository.get_all_airports().first()
        assert len(airports) == len(SAMPLE_AIRPORTS)
        assert isinstance(app.controller.preferences, DatabasePreferenceStore)

    @pytest.mark.asyncio
    async def test_seeds_from_csv(self, tmp_path):
        csv_file = tmp_path / "airports.csv"
        csv_file.write_text("iata_code,name,passengers\nBGO,Bergen Airport Flesland,6000000\n")
        config = FlightSearchConfig(database_url="sqlite:///:memory:", airports_csv=str(csv_file))

        application = build_application(config)
        try:
            airports = await application.repository.get_all_airports().first()
            assert [a.iata_code for a in airports] == ["BGO"]
        finally:
            await application.close()

    @pytest.mark.asyncio
    async def test_seeding_can_be_disabled(self):
        application = build_application(
            FlightSearchConfig(database_url="sqlite:///:memory:", seed_sample_data=False)
        )
        try:
            assert await application.repository.get_all_airports().first() == []
        finally:
            await application.close()


class TestHandleLine:
    """Console commands map onto controller intents."""

    @pytest.mark.asyncio
    async def test_plain_text_is_a_query(self, app):
        assert await handle_line(app, "Lond\n") is True
        state = await app.controller.state.wait_for(lambda s: s.suggestions, WAIT)
        assert state.search_query == "Lond"

    @pytest.mark.asyncio
    async def test_select_and_clear(self, app):
        await handle_line(app, "/select muc")
        assert app.controller.ui_state.selected_airport.iata_code == "MUC"

        await handle_line(app, "/clear")
        assert app.controller.ui_state.selected_airport is None
        assert app.controller.ui_state.search_query == ""

    @pytest.mark.asyncio
    async def test_select_unknown_airport(self, app, capsys):
        await handle_line(app, "/select XYZ")
        assert "Unknown airport 'XYZ'" in capsys.readouterr().out
        assert app.controller.ui_state.selected_airport is None

    @pytest.mark.asyncio
    async def test_fav_toggles_route(self, app):
        await handle_line(app, "/fav muc sfo")
        assert await app.repository.is_favorite("MUC", "SFO") is True

        await handle_line(app, "/fav MUC SFO")
        assert await app.repository.is_favorite("MUC", "SFO") is False

    @pytest.mark.asyncio
    async def test_fav_usage(self, app, capsys):
        await handle_line(app, "/fav MUC")
        assert "Usage: /fav DEP DST" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_quit(self, app):
        assert await handle_line(app, "/quit") is False

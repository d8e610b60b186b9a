"""
Test session parsing, variable extraction and purchase-event mining.

Tests edge cases including:
- Missing teams, domains and counters
- Non-numeric, NaN and boolean values in numeric fields
- Non-purchase log entries
"""

import pytest

from src.functions.deterrence_research.core.contracts import (
    CardCatalog,
    GameSession,
    SessionValidationError,
    parse_sessions,
    validate_game_session,
)
from src.functions.deterrence_research.core.extraction import (
    VARIABLE_CATALOG,
    VariableExtractor,
    extract_card_id,
    iter_purchases,
)
from tests.deterrence_research.fixtures import (
    SAMPLE_CARDS,
    log_entry,
    make_session,
    purchase,
    sample_catalog,
    session_record,
)


class TestSessionParsing:
    """Test lenient parsing of session-store records."""

    def test_parses_camel_case_record(self):
        """Test that nested camelCase fields map onto the contracts."""
        session = validate_game_session(
            session_record("Alpha", nato_total=120, russia_total=90, turn=4, max_turns=8)
        )

        assert session.session_name == "Alpha"
        assert session.game_state.turn == 4
        assert session.game_state.max_turns == 8
        assert session.game_state.team("NATO").total_deterrence == 120
        assert session.game_state.team("Russia").total_deterrence == 90

    def test_missing_game_state_defaults_to_empty(self):
        """Test that a record without gameState still parses."""
        session = validate_game_session({"sessionName": "Empty"})

        assert session.game_state.turn == 0
        assert session.game_state.strategy_log == []
        assert session.game_state.team("NATO").total_deterrence == 0

    def test_malformed_numbers_default_to_zero(self):
        """Test that strings, booleans and NaN read as 0."""
        record = session_record("Odd")
        record["gameState"]["turn"] = "seven"
        record["gameState"]["teams"]["NATO"]["totalDeterrence"] = float("nan")
        record["gameState"]["teams"]["Russia"]["totalDeterrence"] = True

        session = validate_game_session(record)

        assert session.game_state.turn == 0
        assert session.game_state.team("NATO").total_deterrence == 0
        assert session.game_state.team("Russia").total_deterrence == 0

    def test_missing_name_is_rejected(self):
        """Test that a record without a sessionName fails validation."""
        with pytest.raises(SessionValidationError, match="sessionName"):
            validate_game_session({"gameState": {}})

    def test_non_object_record_is_rejected(self):
        with pytest.raises(SessionValidationError, match="JSON object"):
            validate_game_session(["not", "a", "session"])

    def test_parse_sessions_reports_index(self):
        """Test that list parsing names the failing record."""
        with pytest.raises(SessionValidationError, match="index 1"):
            parse_sessions([session_record("Alpha"), {"sessionName": ""}])

    def test_parse_sessions_requires_list(self):
        with pytest.raises(SessionValidationError):
            parse_sessions({"sessionName": "Alpha"})

    def test_to_dict_round_trips_names(self):
        session = make_session("Alpha", nato_total=5)
        data = session.to_dict()

        assert data["sessionName"] == "Alpha"
        assert data["gameState"]["teams"]["NATO"]["totalDeterrence"] == 5
        assert GameSession.from_dict(data).game_state.team("NATO").total_deterrence == 5


class TestCardCatalog:
    """Test the static card catalog."""

    def test_lookup_and_name_fallback(self):
        catalog = sample_catalog()

        assert catalog.get("J1").domain == "joint"
        assert catalog.name_for("J1") == "Joint Exercise"
        assert catalog.name_for("ZZ9") == "ZZ9"
        assert "ZZ9" not in catalog

    def test_card_without_domain(self):
        """Test that a record without a valid domain keeps domain None."""
        assert sample_catalog().get("X0").domain is None

    def test_malformed_records_are_skipped(self):
        catalog = CardCatalog.from_records(SAMPLE_CARDS + [{"name": "No id"}, "junk"])
        assert len(catalog) == len(SAMPLE_CARDS)

    def test_load_from_file(self, tmp_path):
        import json

        path = tmp_path / "cards.json"
        path.write_text(json.dumps(SAMPLE_CARDS))

        catalog = CardCatalog.load(str(path))

        assert len(catalog) == len(SAMPLE_CARDS)

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            CardCatalog.load(str(tmp_path / "missing.json"))

    def test_load_rejects_non_array(self, tmp_path):
        path = tmp_path / "cards.json"
        path.write_text('{"id": "J1"}')

        with pytest.raises(ValueError, match="array"):
            CardCatalog.load(str(path))


class TestVariableExtractor:
    """Test per-session variable extraction."""

    def test_catalog_has_fourteen_variables(self):
        ids = [descriptor.id for descriptor in VARIABLE_CATALOG]

        assert len(ids) == 14
        assert ids[:2] == ["nato_total", "russia_total"]
        assert "russia_cyber" in ids
        assert ids[-2:] == ["turn_count", "card_count"]

    def test_totals_domains_and_turns(self):
        session = make_session(
            "Alpha",
            nato_total=120,
            russia_total=90,
            turn=5,
            nato_deterrence={"economy": 42},
        )
        extractor = VariableExtractor()

        assert extractor.extract(session, "nato_total") == 120
        assert extractor.extract(session, "russia_total") == 90
        assert extractor.extract(session, "nato_economy") == 42
        assert extractor.extract(session, "turn_count") == 5

    def test_missing_values_read_as_zero(self):
        """Test that absent domains, teams and unknown ids yield 0."""
        session = GameSession.from_dict({"sessionName": "Bare"})
        extractor = VariableExtractor()

        assert extractor.extract(session, "nato_cyber") == 0
        assert extractor.extract(session, "russia_total") == 0
        assert extractor.extract(session, "not_a_variable") == 0

    def test_card_count_counts_every_team_log_entry(self):
        """Test that card_count includes non-purchase entries of both teams."""
        session = make_session(
            "Alpha",
            strategy_log=[
                purchase("NATO", "J1"),
                log_entry("NATO", "NATO committed purchases"),
                purchase("Russia", "CY7"),
                log_entry("System", "Turn advanced"),
            ],
        )

        assert VariableExtractor().extract(session, "card_count") == 3

    def test_labels(self):
        extractor = VariableExtractor()

        assert extractor.label_for("nato_economy") == "NATO Economy Deterrence"
        assert extractor.label_for("card_count") == "Cards Purchased"
        assert extractor.label_for("mystery") == "mystery"
        assert extractor.is_known("turn_count")
        assert not extractor.is_known("mystery")


class TestPurchaseParser:
    """Test purchase-event mining from log text."""

    def test_extracts_card_id(self):
        assert extract_card_id("NATO purchased Joint Exercise (J1) for 100K") == "J1"

    def test_card_name_with_parentheses(self):
        """Test that the id is taken from the last parenthesised group."""
        action = "Russia purchased Hybrid Ops (Phase 2) (CY-7) for 80K"
        assert extract_card_id(action) == "CY-7"

    def test_non_purchase_entries_are_ignored(self):
        assert extract_card_id("NATO committed purchases") is None
        assert extract_card_id("") is None

    def test_iter_purchases_keeps_log_order(self):
        session = make_session(
            "Alpha",
            strategy_log=[
                purchase("NATO", "J1", turn=1),
                log_entry("NATO", "Turn ended"),
                purchase("Russia", "CY7", turn=2),
            ],
        )

        events = list(iter_purchases(session))

        assert [(e.team, e.card_id, e.turn) for e in events] == [
            ("NATO", "J1", 1),
            ("Russia", "CY7", 2),
        ]
        assert all(e.session_name == "Alpha" for e in events)

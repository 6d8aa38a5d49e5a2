"""Unit tests for natural key lookups."""
import pytest
from sqlalchemy import select

from forest_schema.crud import insert, insert_many
from forest_schema.lookups import (
    AmbiguousKeyError,
    UnknownKeyError,
    activity_id,
    activity_ids,
    forest_id,
    resolve_activity,
    resolve_forest,
    resolve_state,
    state_id,
)
from forest_schema.models import Activity, State, StateForest


def _id_of(session, model, **filters):
    stmt = select(model.id).filter_by(**filters)
    return session.scalars(stmt).one()


class TestStateLookup:
    """Test state lookups by name or abbreviation."""

    def test_abbreviation_and_name_agree(self, seeded_session):
        """Test "AL" and "Alabama" resolve to the same row."""
        alabama = _id_of(seeded_session, State, abrv="AL")
        assert state_id(seeded_session, "AL") == alabama
        assert state_id(seeded_session, "Alabama") == alabama

    def test_abbreviation_case_insensitive(self, seeded_session):
        assert state_id(seeded_session, "fl") == _id_of(seeded_session, State, abrv="FL")

    def test_every_state_resolves(self, seeded_session, sample_states):
        for name, abrv in sample_states:
            expected = _id_of(seeded_session, State, abrv=abrv)
            assert state_id(seeded_session, name) == expected
            assert state_id(seeded_session, abrv) == expected

    def test_unknown_state(self, seeded_session):
        assert state_id(seeded_session, "ZZ") is None
        assert state_id(seeded_session, "Atlantis") is None

    def test_two_characters_means_abbreviation(self, seeded_session):
        """Test a two-character key never matches on the name column."""
        insert(seeded_session, State, name="Ka", abrv="KS")
        assert state_id(seeded_session, "Ka") is None

    def test_resolve_state(self, seeded_session):
        assert resolve_state(seeded_session, "Georgia") == _id_of(seeded_session, State, abrv="GA")

    def test_resolve_unknown_state(self, seeded_session):
        with pytest.raises(UnknownKeyError) as exc_info:
            resolve_state(seeded_session, "Atlantis")

        assert exc_info.value.entity == "state"
        assert exc_info.value.keys == ["Atlantis"]
        assert isinstance(exc_info.value, LookupError)


class TestForestLookup:
    """Test forest lookups by name."""

    @pytest.fixture
    def forests(self, seeded_session):
        alabama = _id_of(seeded_session, State, abrv="AL")
        florida = _id_of(seeded_session, State, abrv="FL")
        return insert_many(seeded_session, StateForest, [
            {"state_id": alabama, "name": "Geneva", "acres": 7120},
            {"state_id": alabama, "name": "Little River", "acres": 2100},
            {"state_id": florida, "name": "Little River", "acres": 999},
        ])

    def test_forest_name_normalized(self, seeded_session, forests):
        assert forest_id(seeded_session, "geneva") == forests[0].id
        assert forest_id(seeded_session, "GENEVA") == forests[0].id

    def test_unknown_forest(self, seeded_session, forests):
        assert forest_id(seeded_session, "Sherwood") is None

    def test_ambiguous_name_returns_first(self, seeded_session, forests):
        """Test a duplicated name returns the first matching row."""
        assert forest_id(seeded_session, "little river") == forests[1].id

    def test_resolve_ambiguous_forest(self, seeded_session, forests):
        with pytest.raises(AmbiguousKeyError) as exc_info:
            resolve_forest(seeded_session, "Little River")

        assert exc_info.value.ids == [forests[1].id, forests[2].id]
        assert "matches 2 rows" in str(exc_info.value)

    def test_resolve_forest(self, seeded_session, forests):
        assert resolve_forest(seeded_session, "Geneva") == forests[0].id

    def test_resolve_forest_within_state(self, seeded_session, forests):
        """Test a state key picks one of several same-named forests."""
        assert resolve_forest(seeded_session, "Little River", "AL") == forests[1].id
        assert resolve_forest(seeded_session, "little river", "Florida") == forests[2].id

    def test_resolve_forest_missing_from_state(self, seeded_session, forests):
        with pytest.raises(UnknownKeyError):
            resolve_forest(seeded_session, "Geneva", "FL")


class TestActivityLookup:
    """Test activity lookups by name."""

    def test_activity_lower_cased(self, seeded_session):
        hiking = _id_of(seeded_session, Activity, name="hiking")
        assert activity_id(seeded_session, "Hiking") == hiking
        assert activity_id(seeded_session, "HIKING") == hiking

    def test_unknown_activity(self, seeded_session):
        assert activity_id(seeded_session, "skiing") is None
        with pytest.raises(UnknownKeyError):
            resolve_activity(seeded_session, "skiing")

    def test_activity_ids_mapping(self, seeded_session, sample_activities):
        mapping = activity_ids(seeded_session)
        assert set(mapping) == set(sample_activities)
        assert mapping["fishing"] == _id_of(seeded_session, Activity, name="fishing")

"""Unit tests for the profile repository."""

import pytest
from postgrest.exceptions import APIError

from tourplanner.core.errors import DatabaseError
from tourplanner.infrastructure.database import ProfileRepository


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Records the builder chain and returns a canned result."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def __getattr__(self, name):
        def step(*args):
            self.calls.append((name, args))
            return self

        return step

    def execute(self):
        if self.error is not None:
            raise self.error
        return self.result


class FakeDb:
    def __init__(self, query):
        self.query = query
        self.tables = []

    def table(self, name):
        self.tables.append(name)
        return self.query


class FakeClient:
    def __init__(self, query):
        self.client = FakeDb(query)


class TestProfileRepository:
    """Test ProfileRepository.get_profile."""

    def test_returns_row(self):
        """Test an existing profile row is returned."""
        query = FakeQuery(FakeResponse({"id": "u1", "display_name": "Jane"}))
        client = FakeClient(query)

        profile = ProfileRepository(client=client).get_profile("u1")

        assert profile == {"id": "u1", "display_name": "Jane"}
        assert client.client.tables == ["profiles"]
        assert ("eq", ("id", "u1")) in query.calls

    @pytest.mark.parametrize("result", [None, FakeResponse(None)])
    def test_missing_row(self, result):
        """Test no row yields None."""
        repo = ProfileRepository(client=FakeClient(FakeQuery(result)))

        assert repo.get_profile("u1") is None

    def test_database_error_is_mapped(self):
        """Test PostgREST errors surface as categorized DatabaseError."""
        error = APIError({"message": "duplicate key", "code": "23505", "hint": None, "details": None})
        repo = ProfileRepository(client=FakeClient(FakeQuery(error=error)))

        with pytest.raises(DatabaseError) as exc_info:
            repo.get_profile("u1")

        assert exc_info.value.status_code == 409
        assert exc_info.value.code == "CONFLICT"

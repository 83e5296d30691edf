"""
Property-based testing for the storage state engine using Hypothesis.

These tests generate snapshots and check that restoring then capturing gives
the same snapshot back, that restoring twice equals restoring once, and that
injection always happens on the origin being restored.
"""

import asyncio
import json

from hypothesis import given, settings, strategies as st
from hypothesis.strategies import composite

from mcp_storage_state.capture import capture
from mcp_storage_state.models import StorageStateSnapshot
from mcp_storage_state.restore import restore
from mcp_storage_state.serializer import dumps_snapshot, parse_snapshot
from mcp_storage_state.typing_utils import ensure_string

from .conftest import FakeBrowserSession

host_text = st.text(alphabet="abcdefghijklmnopqrstuvwxyz", min_size=1, max_size=12)
storage_text = st.text(max_size=30)


@composite
def cookie_strategy(draw):
    """Generate cookies in the browser's JSON shape."""
    cookie = {
        "name": draw(st.text(alphabet="abcdefghijklmnopqrstuvwxyz_", min_size=1, max_size=10)),
        "value": draw(storage_text),
        "domain": draw(host_text) + ".test",
        "path": draw(st.sampled_from(["/", "/app", "/api/v1"])),
    }
    if draw(st.booleans()):
        cookie["httpOnly"] = draw(st.booleans())
    if draw(st.booleans()):
        cookie["sameSite"] = draw(st.sampled_from(["Strict", "Lax", "None"]))
    return cookie


@composite
def origin_strategy(draw):
    """Generate an origin with uniquely named, non-empty local storage."""
    entries = draw(
        st.lists(
            st.fixed_dictionaries({"name": storage_text, "value": storage_text}),
            min_size=1,
            max_size=5,
            unique_by=lambda entry: entry["name"],
        )
    )
    return {"origin": f"https://{draw(host_text)}.test", "localStorage": entries}


@composite
def snapshot_strategy(draw):
    """Generate snapshots without duplicate cookies or origins."""
    cookies = draw(
        st.lists(
            cookie_strategy(),
            max_size=5,
            unique_by=lambda c: (c["name"], c["domain"], c["path"]),
        )
    )
    origins = draw(
        st.lists(origin_strategy(), max_size=4, unique_by=lambda o: o["origin"])
    )
    return StorageStateSnapshot.model_validate({"cookies": cookies, "origins": origins})


class TestRestoreProperties:
    """Properties of restore against an in-memory browser tab."""

    @settings(max_examples=50, deadline=None)
    @given(snapshot_strategy())
    def test_restore_then_capture_round_trips(self, snapshot: StorageStateSnapshot):
        session = FakeBrowserSession()

        async def scenario() -> StorageStateSnapshot:
            await restore(session, snapshot)
            return await capture(session)

        assert asyncio.run(scenario()) == snapshot

    @settings(max_examples=50, deadline=None)
    @given(snapshot_strategy())
    def test_restore_is_idempotent(self, snapshot: StorageStateSnapshot):
        once = FakeBrowserSession()
        twice = FakeBrowserSession()

        async def scenario() -> None:
            await restore(once, snapshot)
            await restore(twice, snapshot)
            await restore(twice, snapshot)

        asyncio.run(scenario())
        assert once.state() == twice.state()

    @settings(max_examples=50, deadline=None)
    @given(snapshot_strategy())
    def test_injection_happens_on_target_origin(self, snapshot: StorageStateSnapshot):
        session = FakeBrowserSession()

        asyncio.run(restore(session, snapshot))

        injected = [state.origin for state in snapshot.origins if state.local_storage]
        assert len(session.injection_urls) == len(injected)
        for url, origin in zip(session.injection_urls, injected):
            assert url.startswith(origin)


class TestSerializationProperties:
    """Properties of the JSON encoding."""

    @given(snapshot_strategy())
    def test_encoding_is_valid_json_that_parses_back(self, snapshot: StorageStateSnapshot):
        text = dumps_snapshot(snapshot)

        assert json.loads(text) == snapshot.to_dict()
        assert parse_snapshot(text) == snapshot

    @given(st.one_of(st.none(), st.text(), st.integers(), st.floats()))
    def test_ensure_string_robustness(self, value):
        """Test ensure_string with various input types."""
        result = ensure_string(value)
        assert isinstance(result, str)

        if value is None:
            assert result == ""

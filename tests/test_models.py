"""Tests for the snapshot data model."""

import logging

import pytest
from pydantic import ValidationError

from mcp_storage_state.models import (
    Cookie,
    OriginState,
    RestorePhase,
    RestoreReport,
    StorageStateSnapshot,
)

from .conftest import EXAMPLE_STATE

_COOKIE = {"name": "sid", "value": "1", "domain": "example.com", "path": "/"}


def test_snapshot_from_json_shape():
    snapshot = StorageStateSnapshot.model_validate(EXAMPLE_STATE)

    assert snapshot.cookies[0].name == "session"
    assert snapshot.cookies[0].domain == "example.com"
    assert snapshot.origins[0].origin == "https://example.com"
    assert snapshot.origins[0].local_storage[0].value == "dark"


def test_snapshot_is_immutable():
    snapshot = StorageStateSnapshot.model_validate(EXAMPLE_STATE)

    with pytest.raises(ValidationError):
        snapshot.cookies = ()
    with pytest.raises(ValidationError):
        snapshot.cookies[0].value = "changed"


def test_cookie_optional_fields_use_camel_case_and_are_omitted_when_unset():
    cookie = Cookie.model_validate(
        {
            "name": "sid",
            "value": "1",
            "domain": ".example.com",
            "path": "/",
            "httpOnly": True,
            "sameSite": "Lax",
        }
    )

    assert cookie.http_only is True
    assert cookie.to_dict() == {
        "name": "sid",
        "value": "1",
        "domain": ".example.com",
        "path": "/",
        "httpOnly": True,
        "sameSite": "Lax",
    }


def test_unknown_fields_are_ignored():
    snapshot = StorageStateSnapshot.model_validate(
        {
            "cookies": [
                {
                    "name": "a",
                    "value": "b",
                    "domain": "example.com",
                    "path": "/",
                    "partitionKey": "https://example.com",
                }
            ],
            "origins": [{"origin": "https://example.com", "sessionStorage": []}],
            "version": 3,
        }
    )

    assert "partitionKey" not in snapshot.cookies[0].to_dict()
    assert snapshot.origins[0].local_storage == ()


def test_duplicate_cookies_are_kept():
    cookie = {"name": "a", "value": "1", "domain": "example.com", "path": "/"}
    snapshot = StorageStateSnapshot.model_validate(
        {"cookies": [cookie, {**cookie, "value": "2"}], "origins": []}
    )

    assert [c.value for c in snapshot.cookies] == ["1", "2"]


def test_duplicate_origins_last_wins(caplog):
    caplog.set_level(logging.WARNING, logger="mcp_storage_state.models")

    snapshot = StorageStateSnapshot.model_validate(
        {
            "cookies": [],
            "origins": [
                {"origin": "https://a.test", "localStorage": [{"name": "k", "value": "old"}]},
                {"origin": "https://b.test", "localStorage": []},
                {"origin": "https://a.test", "localStorage": [{"name": "x", "value": "new"}]},
            ],
        }
    )

    assert [state.origin for state in snapshot.origins] == ["https://b.test", "https://a.test"]
    assert snapshot.origins[1].effective_items() == {"x": "new"}
    assert [record.getMessage() for record in caplog.records] == [
        "Duplicate origin https://a.test in storage state, keeping the last entry"
    ]


def test_effective_items_last_write_wins():
    state = OriginState.model_validate(
        {
            "origin": "https://example.com",
            "localStorage": [
                {"name": "theme", "value": "light"},
                {"name": "lang", "value": "en"},
                {"name": "theme", "value": "dark"},
            ],
        }
    )

    assert state.effective_items() == {"theme": "dark", "lang": "en"}


def test_to_dict_is_canonical():
    snapshot = StorageStateSnapshot.model_validate(EXAMPLE_STATE)

    assert snapshot.to_dict() == EXAMPLE_STATE
    assert StorageStateSnapshot.empty().to_dict() == {"cookies": [], "origins": []}


@pytest.mark.parametrize(
    "data",
    [
        {"origins": []},
        {"cookies": []},
        {"cookies": {}, "origins": []},
        {"cookies": [], "origins": "https://example.com"},
        {"cookies": [], "origins": [{"localStorage": []}]},
        {"cookies": [{"name": "a", "value": "b"}], "origins": []},
        {"cookies": [{**_COOKIE, "httpOnly": "yes"}], "origins": []},
        {"cookies": [{**_COOKIE, "secure": 1}], "origins": []},
        {"cookies": [{**_COOKIE, "expires": "123"}], "origins": []},
        {"cookies": [{**_COOKIE, "expires": float("nan")}], "origins": []},
        {"cookies": [{**_COOKIE, "expires": float("inf")}], "origins": []},
        [],
    ],
)
def test_invalid_shapes_are_rejected(data):
    with pytest.raises(ValidationError):
        StorageStateSnapshot.model_validate(data)


def test_restore_report_partial_application():
    report = RestoreReport(cookies_applied=2, phase=RestorePhase.FAILED)
    assert report.partially_applied is True
    assert report.to_dict()["phase"] == "failed"

    assert RestoreReport(phase=RestorePhase.FAILED).partially_applied is False
    assert RestoreReport(cookies_applied=2, phase=RestorePhase.DONE).partially_applied is False


def test_cookie_expiry_accepts_json_integers():
    cookie = Cookie.model_validate({**_COOKIE, "expires": -1, "secure": False})

    assert cookie.expires == -1.0
    assert cookie.to_dict()["secure"] is False

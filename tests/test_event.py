import json

import pytest

from amplitude_tracker import ConfigurationIssue, Event

pytestmark = pytest.mark.unit


def test_set_assigns_known_fields_and_folds_the_rest():
    event = Event().set({"eventType": "purchase", "userId": "u-1", "sku": "A-1"})
    assert event.event_type == "purchase"
    assert event.user_id == "u-1"
    assert event.event_properties == {"sku": "A-1"}


def test_set_accepts_keyword_arguments_and_context_fields():
    event = Event().set(device_id="d-1", platform="Web", osName="Linux")
    assert event.device_id == "d-1"
    assert event.context == {"platform": "Web", "os_name": "Linux"}
    assert event.event_properties == {}


def test_set_merges_property_maps():
    event = Event(event_properties={"a": 1})
    event.set({"event_properties": {"b": 2}, "user_properties": {"plan": "pro"}})
    assert event.event_properties == {"a": 1, "b": 2}
    assert event.user_properties == {"plan": "pro"}


def test_set_user_properties_overrides_on_collision():
    event = Event()
    event.set_user_properties({"p": 1, "q": 1})
    event.set_user_properties({"q": 2})
    assert event.user_properties == {"p": 1, "q": 2}


def test_get_and_unset():
    event = Event().set({"event_type": "view", "user_id": "u-1", "country": "NL", "page": "home"})
    assert event.get("userId") == "u-1"
    assert event.get("country") == "NL"
    assert event.get("page") == "home"
    assert event.get("missing", "fallback") == "fallback"

    event.unset("user_id").unset("country").unset("page").unset("event_type")
    assert event.user_id is None
    assert event.context == {}
    assert event.event_properties == {}
    assert event.event_type == ""


def test_missing_requirement():
    assert Event().missing_requirement() is ConfigurationIssue.NO_EVENT_TYPE
    assert Event(event_type="x").missing_requirement() is ConfigurationIssue.NO_IDENTITY
    assert Event(event_type="x", device_id="d").missing_requirement() is None
    assert Event(event_type="x", user_id="u").missing_requirement() is None


def test_wire_payload_omits_empty_fields():
    payload = Event(event_type="login", user_id="u-1", device_id="").to_wire()
    assert payload == {"event_type": "login", "user_id": "u-1"}


def test_wire_payload_always_has_event_type():
    assert Event().to_wire() == {"event_type": ""}


def test_wire_payload_includes_everything_set():
    event = Event(event_type="purchase", user_id="u-1", device_id="d-1")
    event.set({"revenue": 9.99, "item": "book", "ip": ""})
    event.set_user_properties({"plan": "pro"})
    assert json.loads(event.to_json()) == {
        "event_type": "purchase",
        "user_id": "u-1",
        "device_id": "d-1",
        "revenue": 9.99,
        "event_properties": {"item": "book"},
        "user_properties": {"plan": "pro"},
    }


def test_capitalized_keys_stay_event_properties():
    event = Event().set({"Time": "later", "City": "x", "UserId": "u-1"})
    assert event.context == {}
    assert event.user_id is None
    assert event.event_properties == {"Time": "later", "City": "x", "UserId": "u-1"}
    assert event.get("City") == "x"

import base64
from datetime import datetime, timezone

import pytest

from src.tracking.position_ingest.exceptions import PositionDecodeException
from src.tracking.position_ingest.schemas import PositionEventCreate


def encode_colon_payload(parts: list[str]) -> str:
    return base64.b64encode(":".join(parts).encode()).decode()


def test_from_base64_valid_payload():
    parts = ["7", "1704103200", "40.7128", "-74.0060", "55.5", "true"]
    event = PositionEventCreate.from_base64(encode_colon_payload(parts))

    assert event.vehicle_id == 7
    assert event.timestamp == datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
    assert event.latitude == 40.7128
    assert event.longitude == -74.0060
    assert event.speed == 55.5
    assert event.ignition is True


def test_from_base64_optional_fields_empty():
    parts = ["7", "1704103200", "40.7128", "-74.0060", "", ""]
    event = PositionEventCreate.from_base64(encode_colon_payload(parts))

    assert event.speed is None
    assert event.ignition is None


def test_from_base64_strips_quotes():
    raw = '"7:1704103200:1.5:2.5:0:false"'
    event = PositionEventCreate.from_base64(base64.b64encode(raw.encode()).decode())

    assert event.vehicle_id == 7
    assert event.ignition is False


def test_dedup_key_is_vehicle_and_instant():
    parts = ["7", "1704103200", "1.0", "2.0", "", ""]
    event = PositionEventCreate.from_base64(encode_colon_payload(parts))

    assert event.dedup_key() == "position_event:7:1704103200.0"


@pytest.mark.parametrize(
    "payload, error_fragment",
    [
        ("not-a-valid-base64!", "Failed to decode"),
        (encode_colon_payload(["7", "1704103200", "1.0"]), "not enough values"),
        (
            encode_colon_payload(["7", "1704103200", "1", "2", "3", "true", "x"]),
            "too many values",
        ),
        (
            encode_colon_payload(["seven", "1704103200", "1", "2", "", ""]),
            "invalid literal for int",
        ),
        (
            encode_colon_payload(["7", "soon", "1", "2", "", ""]),
            "could not convert string to float",
        ),
        (encode_colon_payload(["7", "1704103200", "95", "2", "", ""]), "latitude"),
        (encode_colon_payload(["7", "1704103200", "1", "2", "999", ""]), "speed"),
    ],
)
def test_from_base64_invalid_payload(payload, error_fragment):
    with pytest.raises(PositionDecodeException) as exc:
        PositionEventCreate.from_base64(payload)

    assert error_fragment in str(exc.value)
    assert exc.value.payload == payload

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from flights.errors import TraceFetchError
from flights.ingestors.trace import parse_trace, trace_url
from flights.models import Flying, Grounded, PositionList, make_position

TS = datetime(2024, 1, 5, 12, 0, tzinfo=timezone.utc)


def test_make_position_thresholds_altitude():
    assert isinstance(make_position(TS, 1.0, 2.0, None), Grounded)
    assert isinstance(make_position(TS, 1.0, 2.0, 999.0), Grounded)
    flying = make_position(TS, 1.0, 2.0, 1000.0)
    assert isinstance(flying, Flying)
    assert flying.altitude == 1000.0


def test_flying_rejects_ground_level_altitude():
    with pytest.raises(ValidationError):
        Flying(timestamp=TS, latitude=1.0, longitude=2.0, altitude=500.0)


def test_positions_are_immutable():
    position = make_position(TS, 1.0, 2.0, None)
    with pytest.raises(ValidationError):
        position.latitude = 5.0


def test_position_list_keeps_vertical_state():
    positions = [make_position(TS, 1.0, 2.0, None), make_position(TS, 3.0, 4.0, 12000.0)]

    restored = PositionList.validate_json(PositionList.dump_json(positions))

    assert restored == positions
    assert isinstance(restored[0], Grounded)
    assert isinstance(restored[1], Flying)


def test_parse_trace_handles_ground_sentinel_and_offsets():
    payload = {
        "icao": "4ca7b6",
        "timestamp": 1704456000.0,
        "trace": [
            [0.0, 53.42, -6.27, "ground", 12.0],
            [60.5, 53.43, -6.26, 800, 140.0],
            [120.0, 53.50, -6.20, 3500, 180.0],
            [180.0, None, None, 3600, 180.0],
            [240.0, 53.60, -6.10, None, 200.0],
        ],
    }

    positions = parse_trace(payload)

    assert len(positions) == 4
    assert isinstance(positions[0], Grounded)
    assert isinstance(positions[1], Grounded)
    assert isinstance(positions[2], Flying)
    assert positions[2].altitude == 3500
    assert isinstance(positions[3], Grounded)
    assert positions[0].timestamp == datetime(2024, 1, 5, 12, 0, tzinfo=timezone.utc)
    assert positions[1].latitude == 53.43
    assert positions[1].longitude == -6.26
    assert (positions[2].timestamp - positions[0].timestamp).total_seconds() == 120


def test_parse_trace_empty():
    assert parse_trace({"trace": []}) == []


def test_parse_trace_rejects_non_object():
    with pytest.raises(TraceFetchError):
        parse_trace([1, 2, 3])


def test_trace_url_uses_last_two_hex_digits():
    url = trace_url("https://globe.example/", "4ca7b6", date(2024, 1, 5))
    assert url == (
        "https://globe.example/globe_history/2024/01/05/traces/b6/trace_full_4ca7b6.json"
    )

from datetime import datetime, timedelta, timezone

import pytest

from flights.errors import InvariantError
from flights.models import Flying, Grounded, make_position
from flights.services.legs import legs

START = datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)


def _trace(*altitudes):
    """Build a trace one minute apart; ``None`` marks a ground sample."""

    return [
        make_position(START + timedelta(minutes=idx), 47.0 + idx / 100, 8.0, altitude)
        for idx, altitude in enumerate(altitudes)
    ]


def test_empty_trace_has_no_legs():
    assert legs([]) == []


def test_simple_flight():
    trace = _trace(None, None, 5000, 6000, None)

    result = legs(trace)

    assert len(result) == 1
    assert result[0].from_ == trace[1]
    assert result[0].to == trace[4]


def test_trace_starting_airborne_uses_first_sample():
    trace = _trace(3000, 3000, None)

    result = legs(trace)

    assert len(result) == 1
    assert result[0].from_ == trace[0]
    assert result[0].to == trace[2]


def test_trace_ending_airborne_extends_to_last_sample():
    trace = _trace(None, 4000, 4000)

    result = legs(trace)

    assert len(result) == 1
    assert result[0].from_ == trace[0]
    assert result[0].to == trace[2]


def test_low_altitude_counts_as_ground():
    with_sentinel = _trace(None, 5000, None)
    with_low_altitude = _trace(400, 5000, 999.9)

    assert isinstance(with_low_altitude[0], Grounded)
    assert isinstance(with_low_altitude[2], Grounded)

    sentinel_legs = legs(with_sentinel)
    low_legs = legs(with_low_altitude)
    assert len(sentinel_legs) == len(low_legs) == 1
    assert low_legs[0].from_ == with_low_altitude[0]
    assert low_legs[0].to == with_low_altitude[2]


def test_multiple_legs_in_order():
    trace = _trace(None, 2000, None, None, 8000, 9000, None)

    result = legs(trace)

    assert [(leg.from_, leg.to) for leg in result] == [
        (trace[0], trace[2]),
        (trace[3], trace[6]),
    ]


def test_airborne_start_then_second_flight():
    trace = _trace(12000, None, None, 3000, None)

    result = legs(trace)

    assert [(leg.from_, leg.to) for leg in result] == [
        (trace[0], trace[1]),
        (trace[2], trace[4]),
    ]


def test_airborne_whole_window_is_an_invariant_violation():
    with pytest.raises(InvariantError):
        legs(_trace(35000, 36000, 36000))


def test_grounded_whole_window_is_an_invariant_violation():
    with pytest.raises(InvariantError):
        legs(_trace(None, None))


def test_unterminated_leg_allowed_when_requested():
    trace = _trace(35000, 36000, 36000)

    result = legs(trace, allow_unterminated=True)

    assert len(result) == 1
    assert result[0].from_ == trace[0]
    assert result[0].to == trace[2]
    assert isinstance(result[0].to, Flying)


def test_grounded_window_yields_nothing_when_unterminated_allowed():
    assert legs(_trace(None, None, None), allow_unterminated=True) == []


def test_leg_distance_and_duration():
    trace = _trace(None, 5000, None)

    leg = legs(trace)[0]

    assert leg.duration() == timedelta(minutes=2)
    assert leg.distance_km() == pytest.approx(2.224, rel=1e-3)

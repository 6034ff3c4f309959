"""Tests for the flight loop and its stop conditions."""

import csv
import os

import numpy as np
import pytest

from icbm_sim.config import FlightConstraints
from icbm_sim.simulation import (
    FlightLog, StopReason, check_termination, simulate_flight, step_budget,
)


def test_fresh_rocket_keeps_flying(make_rocket, lifting_params):
    rocket = make_rocket(lifting_params)
    assert check_termination(rocket, FlightConstraints(100.0, 1000.0, 1000.0)) is None

def test_distance_exceeded(make_rocket, lifting_params):
    result = simulate_flight(make_rocket(lifting_params),
                             FlightConstraints(max_flight_time_seconds=7200,
                                               max_distance_threshold=50.0))
    assert result.reason == StopReason.DISTANCE_EXCEEDED
    assert result.rocket.state.travelled_distance_km > 50.0
    assert result.flight_time < 7200

def test_altitude_exceeded(make_rocket, lifting_params):
    result = simulate_flight(make_rocket(lifting_params),
                             FlightConstraints(max_flight_time_seconds=7200,
                                               max_altitude=20.0))
    assert result.reason == StopReason.ALTITUDE_EXCEEDED
    assert result.rocket.altitude > 20.0

def test_distance_checked_before_altitude(make_rocket, lifting_params):
    result = simulate_flight(make_rocket(lifting_params),
                             FlightConstraints(7200, max_distance_threshold=5.0,
                                               max_altitude=5.0))
    assert result.reason == StopReason.DISTANCE_EXCEEDED

def test_landed(make_rocket, lobbing_params):
    result = simulate_flight(make_rocket(lobbing_params), FlightConstraints(7200))
    assert result.reason == StopReason.LANDED
    assert result.rocket.has_landed

def test_time_exhausted(make_rocket, weak_params):
    result = simulate_flight(make_rocket(weak_params), FlightConstraints(100.0))
    assert result.reason == StopReason.TIME_EXHAUSTED
    assert result.steps == 100
    assert result.flight_time == pytest.approx(100.0)

def test_step_budget_rounds_up():
    assert step_budget(10.0, 3.0) == 4
    assert step_budget(10.0, 2.0) == 5
    assert step_budget(7200.0, 1.0) == 7200

def test_fractional_step(make_rocket, weak_params):
    result = simulate_flight(make_rocket(weak_params), FlightConstraints(10.0), step=0.5)
    assert result.steps == 20
    assert result.flight_time == pytest.approx(10.0)

def test_invalid_step(make_rocket, weak_params):
    with pytest.raises(ValueError):
        simulate_flight(make_rocket(weak_params), FlightConstraints(10.0), step=0.0)

def test_rocket_is_mutated_in_place(make_rocket, lifting_params):
    rocket = make_rocket(lifting_params)
    result = simulate_flight(rocket, FlightConstraints(30.0))
    assert result.rocket is rocket
    assert rocket.flight_time == pytest.approx(30.0)
    np.testing.assert_array_equal(result.position, rocket.position)


# ============================================================================
# FlightLog
# ============================================================================

def test_flight_log_records_every_step(make_rocket, lifting_params):
    log = FlightLog()
    result = simulate_flight(make_rocket(lifting_params), FlightConstraints(50.0), log=log)
    assert len(log) == result.steps + 1
    assert log.time[0] == 0.0
    assert log.time[-1] == pytest.approx(50.0)
    assert log.positions().shape == (len(log), 3)
    assert log.mass[0] > log.mass[-1]

def test_flight_log_to_csv(tmp_path, make_rocket, lifting_params):
    log = FlightLog()
    simulate_flight(make_rocket(lifting_params), FlightConstraints(10.0), log=log)
    path = os.path.join(str(tmp_path), "out", "flight.csv")
    log.to_csv(path)

    with open(path, newline='') as fh:
        rows = list(csv.reader(fh))
    assert rows[0][0] == 'time_s'
    assert len(rows) == len(log) + 1

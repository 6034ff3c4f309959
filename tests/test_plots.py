"""
Unit tests for plot generation.

Plots are drawn from a synthetic flight log so no simulation has to run.
"""

import os
import shutil
import tempfile
import unittest
from unittest.mock import MagicMock

import numpy as np

from icbm_sim import constants as C
from icbm_sim.plotting import (
    FlightData,
    _burnout_index,
    extract_flight_data,
    generate_all_plots,
    plot_convergence,
)


class MockLog:
    """Mock flight log with a ballistic-looking arc.

    Thrust is on for the first 30% of the flight, then the rocket coasts
    over the top and comes back down.
    """

    def __init__(self, n_points: int = 100):
        t = np.linspace(0, 1000, n_points)

        self.time = list(t)
        self.altitude = list(400.0 * np.sin(np.pi * t / t[-1]))  # km
        self.speed = list(np.linspace(0.0, 6.0, n_points))  # km/s
        self.mass = list(np.maximum(21000 - 100 * t, 1000.0))  # kg
        self.thrust = list(np.where(t < 300, 0.02, 0.0))  # km/s^2
        self.incline_angle = list(np.linspace(0, 60, n_points))  # deg

        angle = np.linspace(0, 0.5, n_points)
        r = C.EARTH_RADIUS + np.array(self.altitude)
        self.position_x = list(r * np.cos(angle))
        self.position_y = list(np.zeros(n_points))
        self.position_z = list(r * np.sin(angle))

    def __len__(self):
        return len(self.time)


class TestPlotGeneration(unittest.TestCase):
    """Test suite for plot generation functionality."""

    def setUp(self):
        """Create mock log, mock result and temporary directory."""
        self.mock_log = MockLog()
        self.mock_result = MagicMock()
        self.mock_result.history = [5000.0, 3000.0, 1200.0, 800.0, 800.0]
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        """Clean up temporary files after tests."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_generate_all_plots_creates_files(self):
        """Test that generate_all_plots creates all expected plot files."""
        saved = generate_all_plots(self.mock_result, self.mock_log, self.temp_dir)

        self.assertEqual(len(saved), 6)
        for path in saved:
            self.assertTrue(os.path.exists(path), f"Plot file not found: {path}")
            self.assertTrue(path.startswith(self.temp_dir))

    def test_expected_file_names(self):
        saved = generate_all_plots(self.mock_result, self.mock_log, self.temp_dir,
                                   target=np.array([C.EARTH_RADIUS, 0.0, 0.0]))
        names = sorted(os.path.basename(p) for p in saved)
        self.assertEqual(names, [
            '01_convergence.png',
            '02_altitude_profile.png',
            '03_speed_profile.png',
            '04_mass_thrust.png',
            '05_incline_angle.png',
            '06_trajectory_3d.png',
        ])

    def test_output_directory_created(self):
        """Test that output directory is created if it doesn't exist."""
        new_dir = os.path.join(self.temp_dir, 'new_subdir', 'nested')

        saved = generate_all_plots(self.mock_result, self.mock_log, new_dir)

        self.assertTrue(os.path.isdir(new_dir), "Output directory was not created")
        self.assertGreater(len(saved), 0)

    def test_no_result_skips_convergence(self):
        saved = generate_all_plots(None, self.mock_log, self.temp_dir)
        self.assertEqual(len(saved), 5)
        self.assertNotIn('01_convergence.png', [os.path.basename(p) for p in saved])

    def test_no_log_only_convergence(self):
        saved = generate_all_plots(self.mock_result, None, self.temp_dir)
        self.assertEqual([os.path.basename(p) for p in saved], ['01_convergence.png'])

    def test_convergence_with_zero_fitness(self):
        """A zero in the history must not break the log scale."""
        path = plot_convergence([10.0, 1.0, 0.0], self.temp_dir)
        self.assertTrue(os.path.exists(path))


class TestDataExtraction(unittest.TestCase):
    """Test suite for data extraction."""

    def setUp(self):
        self.mock_log = MockLog(n_points=50)

    def test_extract_flight_data_returns_flight_data(self):
        data = extract_flight_data(self.mock_log)
        self.assertIsInstance(data, FlightData)

    def test_extract_flight_data_shapes(self):
        data = extract_flight_data(self.mock_log)
        for array in (data.time, data.altitude, data.speed, data.mass,
                      data.thrust, data.incline_angle):
            self.assertEqual(array.shape, (50,))
        self.assertEqual(data.position.shape, (50, 3))

    def test_burnout_index(self):
        data = extract_flight_data(self.mock_log)
        index = _burnout_index(data)
        self.assertIsNotNone(index)
        self.assertGreaterEqual(data.time[index], 300.0)
        self.assertGreater(data.thrust[index - 1], 0.0)

    def test_burnout_index_without_thrust(self):
        self.mock_log.thrust = [0.0] * 50
        self.assertIsNone(_burnout_index(extract_flight_data(self.mock_log)))


if __name__ == '__main__':
    unittest.main()

"""
ICBM Trajectory Optimizer - Physical Constants and Tuned Defaults

This module defines all physical constants, Earth parameters, rocket defaults
and optimizer tuning constants used throughout the package.

UNITS: distances in km, velocities in km/s, accelerations in km/s^2,
masses in kg, angles in radians. G and EARTH_MASS are SI (m, kg) and must be
scaled by KM_PER_M wherever they meet km-scale positions.
"""

import numpy as np

# =============================================================================
# EARTH PARAMETERS
# =============================================================================

# Gravitational constant (m^3 kg^-1 s^-2)
G = 6.6743e-11

# Earth mass (kg)
EARTH_MASS = 5.972e24

# Earth radius (km)
EARTH_RADIUS = 6378.0

# Sidereal rotation rate (rad/s) about the polar axis
EARTH_ROTATION_RATE = 7.2921159e-5

# Polar axis of the body frame. Geo coordinates put latitude +90 on +Y.
EARTH_POLAR_AXIS = np.array([0.0, 1.0, 0.0])

# Unit conversion
M_PER_KM = 1000.0
KM_PER_M = 0.001

# Upper boundary of each atmosphere layer (km), lowest first
ATMOSPHERE_LAYER_HEIGHTS = (
    ("troposphere", 10.0),
    ("stratosphere", 50.0),
    ("mesosphere", 85.0),
    ("thermosphere", 600.0),
    ("exosphere", 1000.0),
)

# =============================================================================
# ROCKET PARAMETERS
# =============================================================================

# Payload (warhead) mass carried to the target (kg)
PAYLOAD_MASS = 1000.0

# Displacement from the launch position (km) required before a surface
# crossing counts as a landing. Prevents "landing" on the pad before lift-off.
LANDING_DISTANCE_THRESHOLD = 10.0

# Launcher defaults used before a trajectory is solved
START_INCLINE_AFTER_DISTANCE = 8.0          # km
THRUST_INCLINE_MAX_DURATION = 160.0         # s
THRUST_INCLINE_VELOCITY = np.radians(0.5)   # rad/s
FUEL_MASS = 20000.0                         # kg
EXHAUST_VELOCITY = 3.0                      # km/s
MASS_FLOW_RATE = 100.0                      # kg/s

# Altitude tolerance (km) for "below the surface" while on the launch pad
SURFACE_TOLERANCE = 1e-6

# Number of free parameters in a genome (see RocketParameters.GENE_ORDER)
GENOME_LENGTH = 6

# =============================================================================
# SIMULATION PARAMETERS
# =============================================================================

# Integrator time step (s). Results are step-size sensitive, 1 s is the
# resolution the optimizer was tuned with.
DT = 1.0

# Flight time budget (s)
MAX_FLIGHT_TIME = 2 * 60 * 60

# Distance budget as a multiple of the straight-line start->target distance
MAX_DISTANCE_FACTOR = 6.0

# Altitude ceiling (km)
MAX_ALTITUDE = 6000.0

# =============================================================================
# OPTIMIZER PARAMETERS (tuned, not derived)
# =============================================================================

MAX_GENERATIONS = 80
POPULATION_SIZE = 80
POPULATION_SIZE_ACCURATE = 200
MUTATION_RATE = 0.96
BEST_SURVIVE_PERCENT = 0.8
ELITE = 0.1

# Differential evolution
CROSSOVER_PROBABILITY = 0.9   # CR
SCALING_FACTOR = 0.4          # F

# Mutation perturbation bounds
MUTATION_LOW = -2.0
MUTATION_HIGH = 2.0

# Convergence plateau detector
PLATEAU_THRESHOLD = 0.001     # km
PLATEAU_PATIENCE = 20         # generations

# Weight of flight time (s) added to miss distance (km) when minimizing time
FLIGHT_TIME_WEIGHT = 1.0

# Numerical tolerance
ZERO_TOLERANCE = 1e-12

"""
Test cases for the propellant regression phase system.

Run tests with pytest:
    pytest rocketphase/tests/ -v

Or run individual test files:
    pytest rocketphase/tests/test_controller.py -v
"""

from .slab_motor import build_slab_motor, run_slab_motor_test, slab_motor_phases

__all__ = [
    'build_slab_motor',
    'run_slab_motor_test',
    'slab_motor_phases',
]

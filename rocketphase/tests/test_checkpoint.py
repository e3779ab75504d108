"""
Pytest tests for HDF5 checkpoints and restart.
"""

import h5py
import numpy as np
import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from rocketphase.src import (
    PhasePairKey, Simulation, SimulationConfig, read_checkpoint, write_checkpoint
)
from rocketphase.tests.slab_motor import GAS, PARTICLES, build_slab_motor

DT = 1e-5


def make_simulation(**kwargs) -> Simulation:
    system = build_slab_motor(dt=DT, **kwargs)
    return Simulation(system, SimulationConfig(dt=DT, print_interval=0))


@pytest.fixture
def key():
    return PhasePairKey(PARTICLES, GAS)


class TestRestart:
    """A restarted run continues exactly where the first run left off."""

    @pytest.mark.parametrize('Xp', [0.2, 0.0])
    def test_restart_equivalence(self, tmp_path, Xp):
        path = tmp_path / 'restart.h5'

        reference = make_simulation(Xp=Xp)
        reference.run(5)
        write_checkpoint(path, reference.system)
        reference.run(5)

        restarted = make_simulation(Xp=Xp)
        read_checkpoint(path, restarted.system)
        assert restarted.system.step_index == 5
        restarted.run(5)

        for phase in reference.system.phases:
            other = restarted.system.phase(phase.name)
            assert np.allclose(phase.alpha, other.alpha, rtol=1e-12, atol=0), f"{phase.name} fraction differs"
            assert np.allclose(phase.h, other.h, rtol=1e-12, atol=0), f"{phase.name} enthalpy differs"
            assert np.allclose(phase.U, other.U, rtol=1e-12, atol=0), f"{phase.name} velocity differs"
        assert np.isclose(reference.system.time, restarted.system.time)

    def test_transfer_state_restored(self, tmp_path, key):
        path = tmp_path / 'state.h5'

        reference = make_simulation()
        reference.run(3)
        write_checkpoint(path, reference.system)

        restarted = make_simulation()
        read_checkpoint(path, restarted.system)

        ref_interface = reference.system.interface(key)
        new_interface = restarted.system.interface(key)

        assert np.array_equal(restarted.system.mass_transfer(key), reference.system.mass_transfer(key))
        assert np.array_equal(new_interface.alpha_old, ref_interface.alpha_old)
        assert np.array_equal(new_interface.Ug, ref_interface.Ug)
        assert np.array_equal(new_interface.model.As(), ref_interface.model.As())

    def test_missing_rate_is_cold_start(self, tmp_path, key):
        path = tmp_path / 'cold.h5'

        reference = make_simulation()
        reference.run(3)
        write_checkpoint(path, reference.system)

        with h5py.File(path, 'a') as f:
            del f['interfaces'][key.name()]['rDmdt']

        restarted = make_simulation()
        restarted.system.transfer.set_rate(key, np.ones(restarted.system.mesh.n_cells))
        read_checkpoint(path, restarted.system)

        assert np.all(restarted.system.mass_transfer(key) == 0.0)

    def test_reversed_pair_in_checkpoint(self, tmp_path, key):
        """A checkpoint written with the pair in reverse order is re-signed on read."""
        path = tmp_path / 'reversed.h5'

        reference = make_simulation()
        reference.run(2)
        write_checkpoint(path, reference.system)

        R = reference.system.mass_transfer(key)
        with h5py.File(path, 'a') as f:
            interfaces = f['interfaces']
            interfaces.move(key.name(), key.reversed().name())
            g = interfaces[key.reversed().name()]
            g.attrs['first'] = GAS
            g.attrs['second'] = PARTICLES
            g['rDmdt'][...] = -R

        restarted = make_simulation()
        read_checkpoint(path, restarted.system)

        assert np.allclose(restarted.system.mass_transfer(key), R)

    def test_missing_file(self, tmp_path):
        system = build_slab_motor()
        with pytest.raises(FileNotFoundError):
            read_checkpoint(tmp_path / 'absent.h5', system)

    def test_missing_phase(self, tmp_path):
        path = tmp_path / 'phases.h5'
        system = build_slab_motor()
        write_checkpoint(path, system)

        with h5py.File(path, 'a') as f:
            del f['phases'][PARTICLES]

        with pytest.raises(KeyError, match=PARTICLES):
            read_checkpoint(path, build_slab_motor())


class TestPeriodicCheckpoints:

    def test_run_writes_checkpoint(self, tmp_path):
        path = tmp_path / 'periodic.h5'
        system = build_slab_motor(dt=DT)
        sim = Simulation(system, SimulationConfig(dt=DT, print_interval=0,
                                                  write_interval=2, checkpoint=str(path)))
        sim.run(5)

        assert path.exists()
        with h5py.File(path, 'r') as f:
            assert int(f.attrs['step']) == 4

"""
HDF5 checkpoints of the regression phase system.

Layout:
    /attrs                 time, step, dt
    /phases/<name>/        alpha, h, U, phi, alpha_phi, alpha_rho_phi
    /p                     shared pressure
    /interfaces/<pair>/    rDmdt, alpha_old, rb, Ug, Up, model/<state>

Restarting from a checkpoint reproduces the state of the run that wrote it.
A missing rDmdt dataset leaves the transfer rate at zero.
"""

import h5py
import logging
import numpy as np
from pathlib import Path

from .controller import RegressionPhaseSystem
from .pair import PhasePairKey

logger = logging.getLogger(__name__)

PHASE_FIELDS = ('alpha', 'h', 'U', 'phi', 'alpha_phi', 'alpha_rho_phi')


def write_checkpoint(path, system: RegressionPhaseSystem):
    """Write the full restart state of the system."""
    path = Path(path)
    with h5py.File(path, 'w') as f:
        f.attrs['time'] = system.time
        f.attrs['step'] = system.step_index
        f.attrs['dt'] = system.dt
        f.create_dataset('p', data=system.p)

        phases = f.create_group('phases')
        for phase in system.phases:
            g = phases.create_group(phase.name)
            for name in PHASE_FIELDS:
                g.create_dataset(name, data=getattr(phase, name))

        interfaces = f.create_group('interfaces')
        for key, interface in system.interfaces.items():
            g = interfaces.create_group(key.name())
            g.attrs['first'] = key.first
            g.attrs['second'] = key.second
            g.create_dataset('rDmdt', data=system.transfer.rate(key))
            g.create_dataset('alpha_old', data=interface.alpha_old)
            g.create_dataset('rb', data=interface.rb)
            g.create_dataset('Ug', data=interface.Ug)
            g.create_dataset('Up', data=interface.Up)

            model_group = g.create_group('model')
            for name, value in interface.model.state_dict().items():
                model_group.create_dataset(name, data=value)

    logger.info(f"Wrote checkpoint {path} at t = {system.time:.6e} s")


def read_checkpoint(path, system: RegressionPhaseSystem):
    """Restore the state written by write_checkpoint into a freshly built system."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Checkpoint not found: {path}\nExpected at: {path.absolute()}")

    with h5py.File(path, 'r') as f:
        system.time = float(f.attrs['time'])
        system.step_index = int(f.attrs['step'])
        system.dt = float(f.attrs['dt'])
        system.p[:] = np.array(f['p'])

        for phase in system.phases:
            if phase.name not in f['phases']:
                raise KeyError(f"Phase {phase.name} not found in checkpoint. "
                               f"Available phases: {list(f['phases'].keys())}")
            g = f['phases'][phase.name]
            phase.set_alpha(np.array(g['alpha']))
            phase.set_enthalpy(np.array(g['h']))
            phase.set_velocity(np.array(g['U']))
            phase.phi = np.array(g['phi'])
            phase.set_fluxes(np.array(g['alpha_phi']), np.array(g['alpha_rho_phi']))

        for key, interface in system.interfaces.items():
            name = key.name()
            if name not in f['interfaces']:
                name = key.reversed().name()
                if name not in f['interfaces']:
                    logger.warning(f"Interface {key!r} not in checkpoint, starting without transfer")
                    continue

            g = f['interfaces'][name]
            stored_key = PhasePairKey(str(g.attrs['first']), str(g.attrs['second']))
            if 'rDmdt' in g:
                system.transfer.set_rate(stored_key, np.array(g['rDmdt']))
            else:
                # Cold start: no prior transfer
                system.transfer.reset(key)

            interface.alpha_old = np.array(g['alpha_old'])
            interface.rb[:] = np.array(g['rb'])
            interface.Ug[:] = np.array(g['Ug'])
            interface.Up[:] = np.array(g['Up'])
            if 'model' in g:
                interface.model.load_state_dict({k: np.array(v) for k, v in g['model'].items()})

    logger.info(f"Read checkpoint {path} at t = {system.time:.6e} s")

"""
Pytest tests for case configuration files.
"""

import json
import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from rocketphase.src import (
    ConfigurationError, InterfaceConfig, RegressionConfig, SimulationConfig, load_config
)

CASE = {
    'regression': {
        'T_ad': 3300.0,
        'Xp': 0.18,
        'propellant_rho': 1780.0,
        'interfaces': [{
            'pair': ['particles', 'gas'],
            'propellant': 'propellant',
            'model': 'saintRobert',
            'coeffs': {'a': 3.5e-5, 'n': 0.36},
        }],
    },
    'simulation': {'dt': 2e-6, 'n_steps': 500, 'write_interval': 100,
                   'checkpoint': 'motor.h5'},
}


def write_case(path: Path, case: dict) -> Path:
    with open(path, 'w') as f:
        json.dump(case, f)
    return path


class TestLoadConfig:

    def test_load(self, tmp_path):
        regression, simulation = load_config(write_case(tmp_path / 'case.json', CASE))

        assert regression.T_ad == 3300.0
        assert regression.solve_particle
        assert isinstance(regression.interfaces[0], InterfaceConfig)
        assert regression.interfaces[0].pair == ('particles', 'gas')
        assert regression.interfaces[0].coeffs == {'a': 3.5e-5, 'n': 0.36}
        assert simulation.n_steps == 500
        assert simulation.checkpoint == 'motor.h5'

    def test_simulation_defaults(self, tmp_path):
        case = {'regression': CASE['regression']}
        _, simulation = load_config(write_case(tmp_path / 'case.json', case))

        assert simulation == SimulationConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / 'absent.json')

    def test_missing_section(self, tmp_path):
        path = write_case(tmp_path / 'case.json', {'simulation': {}})
        with pytest.raises(ConfigurationError, match="regression"):
            load_config(path)

    def test_missing_entry(self, tmp_path):
        regression = dict(CASE['regression'])
        del regression['T_ad']
        path = write_case(tmp_path / 'case.json', {'regression': regression})

        with pytest.raises(ConfigurationError, match="T_ad"):
            load_config(path)

    def test_unknown_entry(self, tmp_path):
        regression = dict(CASE['regression'], burn_rate=0.01)
        path = write_case(tmp_path / 'case.json', {'regression': regression})

        with pytest.raises(ConfigurationError, match="burn_rate"):
            load_config(path)


class TestRegressionConfig:

    def test_no_interfaces(self):
        with pytest.raises(ConfigurationError, match="interface"):
            RegressionConfig(T_ad=3000.0, Xp=0.2, propellant_rho=1700.0)

    def test_zero_particles(self):
        config = RegressionConfig(T_ad=3000.0, Xp=0.0, propellant_rho=1700.0,
                                  interfaces=CASE['regression']['interfaces'])
        assert not config.solve_particle

    @pytest.mark.parametrize('entry, value', [('T_ad', 0.0), ('propellant_rho', -1.0)])
    def test_non_positive(self, entry, value):
        kwargs = dict(CASE['regression'], **{entry: value})
        with pytest.raises(ConfigurationError):
            RegressionConfig(**kwargs)

    def test_propellant_in_pair(self):
        with pytest.raises(ConfigurationError, match="member"):
            InterfaceConfig(pair=('propellant', 'gas'), propellant='propellant')

    def test_is_value_error(self):
        """Configuration errors can be handled as ValueError."""
        with pytest.raises(ValueError):
            InterfaceConfig(pair=('gas', 'gas'), propellant='propellant')


class TestSectionEntries:
    """Nested sections reject incomplete or misspelt entries."""

    def test_interface_missing_propellant(self):
        interface = {'pair': ['particles', 'gas'], 'model': 'constant'}
        with pytest.raises(ConfigurationError, match="propellant"):
            RegressionConfig(T_ad=3000.0, Xp=0.2, propellant_rho=1700.0, interfaces=[interface])

    def test_interface_unknown_entry(self, tmp_path):
        regression = dict(CASE['regression'])
        regression['interfaces'] = [dict(CASE['regression']['interfaces'][0], rate=0.01)]
        path = write_case(tmp_path / 'case.json', {'regression': regression})

        with pytest.raises(ConfigurationError, match="rate"):
            load_config(path)

    def test_simulation_unknown_entry(self, tmp_path):
        case = dict(CASE, simulation=dict(CASE['simulation'], cfl=0.5))
        path = write_case(tmp_path / 'case.json', case)

        with pytest.raises(ConfigurationError, match="cfl"):
            load_config(path)

    def test_simulation_from_dict(self):
        simulation = SimulationConfig.from_dict({'dt': 1e-6})
        assert simulation.dt == 1e-6
        assert simulation.n_steps == SimulationConfig().n_steps

import copy

import pytest

from heapsim import config
from heapsim.model import Strategy


def test_resolve_strategy():
    assert config.resolve_strategy('first') is Strategy.FIRST_FIT
    assert config.resolve_strategy('best') is Strategy.BEST_FIT
    assert config.resolve_strategy(Strategy.BEST_FIT) is Strategy.BEST_FIT
    with pytest.raises(ValueError):
        config.resolve_strategy('worst')


def test_default_scenario_is_valid():
    assert config.validate_scenario(copy.deepcopy(config.DEFAULT_SCENARIO))


@pytest.mark.parametrize('override', [
    {'block_sizes': []},
    {'block_sizes': [100, 0]},
    {'block_sizes': [10.5]},
    {'split_overhead': -1},
    {'step_interval': 0},
    {'sim_time': -5},
    {'strategy': 'next'},
    {'workload': {'process_sizes': []}},
    {'workload': {'process_sizes': [10], 'avg_arrival_time': 0}},
    {'workload': {'process_sizes': [10], 'avg_lifetime': -1}},
])
def test_invalid_scenarios(override):
    scenario = copy.deepcopy(config.DEFAULT_SCENARIO)
    scenario.update(override)
    with pytest.raises(ValueError):
        config.validate_scenario(scenario)

import pytest

from components import PM, VM, PowerPM, SimulationClock
from policy import EnergyAwareAllocationPolicy


class ManualClock:
    """Clock whose time can be set freely, including backwards."""
    def __init__(self, time=0.0):
        self.time = time

    def now(self):
        return self.time


@pytest.fixture
def clock():
    return SimulationClock()


@pytest.fixture
def hosts():
    return [PM(0, cpu_cap=1000, mem_cap=4096), PM(1, cpu_cap=1000, mem_cap=4096)]


@pytest.fixture
def policy(hosts, clock):
    return EnergyAwareAllocationPolicy(hosts, clock)


@pytest.fixture
def power_host():
    return PowerPM(7, cpu_cap=1000, mem_cap=4096, power_idle=150, power_max=300)


def make_vm(vm_id, cpu, mem=256):
    return VM(vm_id, cpu_req=cpu, mem_req=mem)

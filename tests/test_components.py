"""
Tests for hosts, VMs and the simulation clock.
"""

import pytest

from components import PM, VM, PowerPM, SimulationClock


class TestPM:
    """Tests for the PM capacity model."""

    def test_can_host_checks_every_resource(self):
        pm = PM(0, cpu_cap=1000, mem_cap=1024, bw_cap=100, storage_cap=500)
        assert pm.can_host(VM(0, cpu_req=1000, mem_req=1024, bw_req=100, storage_req=500))
        assert not pm.can_host(VM(1, cpu_req=1001, mem_req=1))
        assert not pm.can_host(VM(2, cpu_req=1, mem_req=2048))
        assert not pm.can_host(VM(3, cpu_req=1, mem_req=1, bw_req=101))
        assert not pm.can_host(VM(4, cpu_req=1, mem_req=1, storage_req=501))

    def test_place_and_remove_track_usage(self):
        pm = PM(0, cpu_cap=1000, mem_cap=1024)
        vm = VM(0, cpu_req=400, mem_req=256)
        assert pm.place_vm(vm)
        assert vm.host is pm
        assert pm.cpu_used == 400
        assert pm.mem_used == 256

        pm.remove_vm(vm)
        assert vm.host is None
        assert pm.vms == []
        assert pm.cpu_used == 0
        assert pm.mem_used == 0

    def test_place_vm_refuses_when_full(self):
        pm = PM(0, cpu_cap=1000, mem_cap=1024)
        assert pm.place_vm(VM(0, cpu_req=800, mem_req=256))
        vm = VM(1, cpu_req=300, mem_req=256)
        assert not pm.place_vm(vm)
        assert vm.host is None
        assert len(pm.vms) == 1

    def test_cannot_host_same_vm_twice(self):
        pm = PM(0, cpu_cap=1000, mem_cap=1024)
        vm = VM(0, cpu_req=100, mem_req=128)
        pm.place_vm(vm)
        assert not pm.can_host(vm)

    def test_plain_pm_has_no_power_curve(self):
        assert not hasattr(PM(0, 1000, 1024), "reported_power")


class TestPowerPM:
    """Tests for hosts reporting their own power draw."""

    def test_linear_curve(self):
        pm = PowerPM(0, 1000, 1024, power_idle=150, power_max=300)
        assert pm.reported_power(0.0) == 150.0
        assert pm.reported_power(1.0) == 300.0
        assert pm.reported_power(0.5) == 225.0

    def test_custom_curve(self):
        pm = PowerPM(0, 1000, 1024, power_idle=100, power_max=300, curve=lambda u: u ** 2)
        assert pm.reported_power(0.5) == 150.0

    def test_utilization_is_clamped(self):
        pm = PowerPM(0, 1000, 1024, power_idle=150, power_max=300)
        assert pm.reported_power(-0.5) == 150.0
        assert pm.reported_power(1.5) == 300.0


class TestSimulationClock:
    """Tests for the monotonic clock."""

    def test_advance(self):
        clock = SimulationClock(5.0)
        assert clock.now() == 5.0
        clock.advance_to(5.0)
        clock.advance_to(12.5)
        assert clock.now() == 12.5

    def test_cannot_move_backwards(self):
        clock = SimulationClock(10.0)
        with pytest.raises(ValueError):
            clock.advance_to(9.0)
        assert clock.now() == 10.0

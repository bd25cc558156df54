import pytest

from components import PM
from energy import account_interval, power_draw, update_energy
from exceptions import InvalidTimeDelta
from metrics import HostMetrics


class DuckHost:
    id = 9

    def reported_power(self, utilization):
        return 42.0


class TestPowerDraw:
    """Tests for power model selection."""

    def test_generic_host_fallback(self):
        pm = PM(0, 1000, 1024)
        assert power_draw(pm, 0.0) == 100.0
        assert power_draw(pm, 0.5) == 150.0
        assert power_draw(pm, 1.0) == 200.0

    def test_power_curve_host(self, power_host):
        assert power_draw(power_host, 0.5) == 225.0

    def test_dispatch_on_capability(self):
        assert power_draw(DuckHost(), 0.3) == 42.0


class TestUpdateEnergy:
    """Tests for integrating power over elapsed time."""

    def test_fallback_half_utilization(self):
        pm = PM(0, 1000, 1024)
        record = HostMetrics(0)
        update_energy(record, pm, 0.5, 10)
        assert record.energy == 1500.0

    def test_zero_delta_adds_nothing(self):
        pm = PM(0, 1000, 1024)
        record = HostMetrics(0)
        update_energy(record, pm, 1.0, 0)
        assert record.energy == 0.0

    def test_negative_delta_aborts(self):
        pm = PM(0, 1000, 1024)
        record = HostMetrics(0)
        record.energy = 500.0
        with pytest.raises(InvalidTimeDelta) as excinfo:
            update_energy(record, pm, 0.5, -1)
        assert excinfo.value.time_delta == -1
        assert record.energy == 500.0

    def test_energy_non_decreasing(self, power_host):
        record = HostMetrics(power_host.id)
        previous = record.energy
        for util, delta in [(0.0, 5), (1.0, 2.5), (0.3, 0), (0.7, 10)]:
            update_energy(record, power_host, util, delta)
            assert record.energy >= previous
            previous = record.energy


class TestAccountInterval:
    """Tests for closing a host's open interval."""

    def test_advances_last_update_time(self):
        pm = PM(0, 1000, 1024)
        record = HostMetrics(0, start_time=5.0)
        delta = account_interval(record, pm, 0.5, 15.0)
        assert delta == 10.0
        assert record.energy == 1500.0
        assert record.last_update_time == 15.0

    def test_backwards_time_leaves_record_untouched(self):
        pm = PM(0, 1000, 1024)
        record = HostMetrics(0, start_time=20.0)
        with pytest.raises(InvalidTimeDelta):
            account_interval(record, pm, 0.5, 10.0)
        assert record.energy == 0.0
        assert record.last_update_time == 20.0

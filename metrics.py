# file: metrics.py

import numpy as np

from exceptions import UnknownHost


class HostMetrics:
    """Energy and utilization record for a single host."""
    def __init__(self, host_id, start_time=0.0):
        self.host_id = host_id
        self.energy = 0.0  # Joules
        self.utilization_history = []
        self.last_update_time = start_time
        self.ever_utilized = False
        self.max_concurrent_vms = 0

    def __repr__(self):
        return (f"HostMetrics(host_id={self.host_id}, energy={self.energy:.2f}, "
                f"samples={len(self.utilization_history)}, max_vms={self.max_concurrent_vms})")


class MetricsRegistry:
    """Per-host metric records owned by one allocation policy.

    Records are created for every host up front, keyed by host id, and live
    as long as the registry does.
    """
    def __init__(self, hosts, start_time=0.0):
        self._records = {host.id: HostMetrics(host.id, start_time) for host in hosts}

    def get(self, host_id):
        try:
            return self._records[host_id]
        except KeyError:
            raise UnknownHost(host_id) from None

    def __contains__(self, host_id):
        return host_id in self._records

    def __iter__(self):
        return iter(self._records.values())

    def __len__(self):
        return len(self._records)

    def active_host_count(self):
        """Hosts that have held at least one VM during the run."""
        return sum(1 for record in self._records.values() if record.ever_utilized)


# --- Utilization tracking ---

def record_utilization(record, value):
    """Appends a utilization sample in [0, 1] to the host's history."""
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"Utilization {value} for host {record.host_id} is outside [0, 1]")
    record.utilization_history.append(value)


def average_utilization(record):
    if not record.utilization_history:
        return 0.0
    return float(np.mean(record.utilization_history))


def peak_utilization(record):
    if not record.utilization_history:
        return 0.0
    return float(np.max(record.utilization_history))


def update_max_concurrent_vms(record, resident_count):
    if resident_count > record.max_concurrent_vms:
        record.max_concurrent_vms = resident_count

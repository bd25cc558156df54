# file: policy.py

import logging

from algorithms import current_utilization, least_loaded_host
from energy import account_interval, check_interval
from exceptions import PlacementRejected, UnknownHost, UnknownVm
from metrics import (
    MetricsRegistry,
    average_utilization,
    peak_utilization,
    record_utilization,
    update_max_concurrent_vms,
)

logger = logging.getLogger(__name__)


class EnergyAwareAllocationPolicy:
    """
    Places VMs on the least-loaded suitable host and keeps per-host
    utilization and energy records.

    Every state change on a host (placement, removal, periodic update) first
    closes the host's open energy interval at the utilization it had during
    that interval, then records the new utilization sample. Calls are expected
    to be serialized by the simulation clock.
    """
    def __init__(self, hosts, clock, start_time=0.0):
        self.hosts = list(hosts)
        self.clock = clock
        self._hosts_by_id = {host.id: host for host in self.hosts}
        self.registry = MetricsRegistry(self.hosts, start_time)

    def _host(self, host_id):
        try:
            return self._hosts_by_id[host_id]
        except KeyError:
            raise UnknownHost(host_id) from None

    # --- Allocation ---

    def allocate_host(self, vm, host=None):
        """
        Places ``vm`` on ``host``, or on the least-loaded suitable host when
        none is given. Returns the chosen host; raises PlacementRejected if the
        VM cannot be placed, leaving all metrics untouched.
        """
        if vm.host is not None:
            logger.debug("VM %s is already resident on host %s", vm.id, vm.host.id)
            raise PlacementRejected(vm, vm.host)

        if host is None:
            host = least_loaded_host(vm, self.hosts)
            if host is None:
                logger.debug("No suitable host for VM %s", vm.id)
                raise PlacementRejected(vm)
        elif self._hosts_by_id.get(host.id) is not host:
            raise UnknownHost(host.id)

        record = self.registry.get(host.id)
        now = self.clock.now()
        check_interval(record, now)

        previous_util = current_utilization(host)
        if not host.place_vm(vm):
            logger.debug("Host %s refused VM %s", host.id, vm.id)
            raise PlacementRejected(vm, host)

        account_interval(record, host, previous_util, now)
        util = current_utilization(host)
        record_utilization(record, util)
        update_max_concurrent_vms(record, len(host.vms))
        record.ever_utilized = True

        logger.info("VM %s allocated to Host %s (Utilization: %.2f%%)", vm.id, host.id, util * 100)
        return host

    def try_allocate_host(self, vm, host=None):
        """Like allocate_host, but returns False instead of raising on rejection."""
        try:
            self.allocate_host(vm, host)
        except PlacementRejected:
            return False
        return True

    def deallocate_host(self, vm):
        """Removes ``vm`` from its host and returns that host."""
        host = self.get_host(vm)
        if host is None:
            raise UnknownVm(vm.id)

        record = self.registry.get(host.id)
        account_interval(record, host, current_utilization(host), self.clock.now())
        host.remove_vm(vm)
        util = current_utilization(host)
        record_utilization(record, util)

        logger.info("VM %s removed from Host %s (Utilization: %.2f%%)", vm.id, host.id, util * 100)
        return host

    def update_host_metrics(self, host_id):
        """Closes the host's energy interval and samples its utilization without changing placement."""
        host = self._host(host_id)
        record = self.registry.get(host_id)
        util = current_utilization(host)
        account_interval(record, host, util, self.clock.now())
        record_utilization(record, util)

    def update_all_hosts(self):
        now = self.clock.now()
        # Check every host first so a clock error leaves no host half-updated.
        for record in self.registry:
            check_interval(record, now)
        for host in self.hosts:
            self.update_host_metrics(host.id)
        logger.debug("Periodic update of %d hosts at t=%.2f", len(self.hosts), now)

    # --- Lookup ---

    def get_host(self, vm):
        """The tracked host the VM currently resides on, or None."""
        if vm.host is not None and self._hosts_by_id.get(vm.host.id) is vm.host and vm in vm.host.vms:
            return vm.host
        for host in self.hosts:
            if vm in host.vms:
                return host
        return None

    def find_host(self, vm_id):
        for host in self.hosts:
            if any(vm.id == vm_id for vm in host.vms):
                return host
        return None

    # --- Queries ---

    def average_utilization(self, host_id):
        return average_utilization(self.registry.get(host_id))

    def peak_utilization(self, host_id):
        return peak_utilization(self.registry.get(host_id))

    def total_energy(self, host_id):
        """Joules consumed by the host so far."""
        return self.registry.get(host_id).energy

    def total_energy_all(self):
        return sum(record.energy for record in self.registry)

    def max_concurrent_vms(self, host_id):
        return self.registry.get(host_id).max_concurrent_vms

    def utilization_history(self, host_id):
        return list(self.registry.get(host_id).utilization_history)

    def active_host_count(self):
        return self.registry.active_host_count()

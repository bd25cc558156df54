# file: components.py

import config


class VM:
    """Represents a Virtual Machine with resource requirements."""
    def __init__(self, vm_id, cpu_req, mem_req, bw_req=0, storage_req=0):
        self.id = vm_id
        self.cpu = cpu_req
        self.mem = mem_req
        self.bw = bw_req
        self.storage = storage_req
        self.host = None  # PM currently hosting this VM

    def current_requested_cpu(self):
        """CPU currently requested by the VM."""
        return self.cpu

    def __repr__(self):
        return f"VM({self.id}, cpu={self.cpu}, mem={self.mem})"


class PM:
    """Represents a Physical Machine with resource capacity.

    A plain PM does not report its own power draw; the energy accountant
    falls back to the linear model in config for it.
    """
    def __init__(self, pm_id, cpu_cap, mem_cap, bw_cap=float('inf'), storage_cap=float('inf')):
        self.id = pm_id
        self.cpu_cap = cpu_cap
        self.mem_cap = mem_cap
        self.bw_cap = bw_cap
        self.storage_cap = storage_cap
        self.vms = []  # List of VMs placed on this PM
        self.cpu_used = 0
        self.mem_used = 0
        self.bw_used = 0
        self.storage_used = 0

    def can_host(self, vm):
        """Checks if the PM has enough free cpu, memory, bandwidth and storage for a VM."""
        if vm in self.vms:
            return False
        return (self.cpu_cap - self.cpu_used >= vm.cpu and
                self.mem_cap - self.mem_used >= vm.mem and
                self.bw_cap - self.bw_used >= vm.bw and
                self.storage_cap - self.storage_used >= vm.storage)

    def place_vm(self, vm):
        """Places a VM on this PM and updates resource usage."""
        if self.can_host(vm):
            self.vms.append(vm)
            self.cpu_used += vm.cpu
            self.mem_used += vm.mem
            self.bw_used += vm.bw
            self.storage_used += vm.storage
            vm.host = self
            return True
        return False

    def remove_vm(self, vm):
        """Removes a resident VM and releases its resources."""
        self.vms.remove(vm)
        self.cpu_used -= vm.cpu
        self.mem_used -= vm.mem
        self.bw_used -= vm.bw
        self.storage_used -= vm.storage
        vm.host = None

    def __repr__(self):
        return f"{type(self).__name__}({self.id}, cpu_cap={self.cpu_cap}, vms={len(self.vms)})"


class PowerPM(PM):
    """A PM that reports a calibrated idle-to-peak power curve.

    ``curve`` maps utilization in [0, 1] to the fraction of the dynamic range
    in use; the default is linear.
    """
    def __init__(self, pm_id, cpu_cap, mem_cap, bw_cap=float('inf'), storage_cap=float('inf'),
                 power_idle=config.POWER_CURVE_IDLE, power_max=config.POWER_CURVE_PEAK, curve=None):
        super().__init__(pm_id, cpu_cap, mem_cap, bw_cap, storage_cap)
        self.power_idle = power_idle  # Watts for an idle server
        self.power_max = power_max    # Watts at 100% utilization
        self.curve = curve

    def reported_power(self, utilization):
        """Power draw in watts at the given utilization."""
        util = min(max(utilization, 0.0), 1.0)
        if self.curve is not None:
            util = self.curve(util)
        return self.power_idle + (self.power_max - self.power_idle) * util


class SimulationClock:
    """Monotonic simulated time, advanced by the event loop."""
    def __init__(self, start=0.0):
        self._time = start

    def now(self):
        return self._time

    def advance_to(self, time):
        if time < self._time:
            raise ValueError(f"Clock cannot move backwards from {self._time} to {time}")
        self._time = time

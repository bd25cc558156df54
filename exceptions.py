# file: exceptions.py


class AllocationError(Exception):
    """Base class for errors raised by the allocation policy."""


class PlacementRejected(AllocationError):
    """No suitable host was found, or the target host refused the VM."""
    def __init__(self, vm, host=None):
        self.vm = vm
        self.host = host
        if host is None:
            msg = f"No suitable host for VM {vm.id}"
        else:
            msg = f"Host {host.id} rejected VM {vm.id}"
        super().__init__(msg)


class InvalidTimeDelta(AllocationError, ValueError):
    """Negative elapsed time; the simulation clock went backwards for a host."""
    def __init__(self, host_id, time_delta):
        self.host_id = host_id
        self.time_delta = time_delta
        super().__init__(f"Negative time delta {time_delta} for host {host_id}")


class UnknownHost(AllocationError, LookupError):
    """The host id is not tracked by the policy."""
    def __init__(self, host_id):
        self.host_id = host_id
        super().__init__(f"Host {host_id} is not tracked by this policy")


class UnknownVm(AllocationError, LookupError):
    """The VM is not resident on any tracked host."""
    def __init__(self, vm_id):
        self.vm_id = vm_id
        super().__init__(f"VM {vm_id} is not resident on any host")

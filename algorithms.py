# file: algorithms.py

# --- Placement selection ---

def current_utilization(pm):
    """CPU requested by the resident VMs as a fraction of capacity, capped at 1.0."""
    if pm.cpu_cap <= 0:
        return 0.0
    used = sum(vm.current_requested_cpu() for vm in pm.vms)
    return min(used / pm.cpu_cap, 1.0)


def least_loaded_host(vm, pms):
    """
    Picks the suitable PM with the lowest current utilization.
    Ties go to the first such PM in pool order. Returns None if no PM can host the VM.
    """
    best_pm = None
    min_util = float('inf')
    for pm in pms:
        if pm.can_host(vm):
            util = current_utilization(pm)
            if util < min_util:
                min_util = util
                best_pm = pm
    return best_pm

# file: main.py

import argparse
import csv
import heapq
import logging
import os
import random

import matplotlib.pyplot as plt
from matplotlib.ticker import MaxNLocator
from rich.logging import RichHandler

import config
from components import PM, VM, PowerPM, SimulationClock
from policy import EnergyAwareAllocationPolicy

logger = logging.getLogger("main")

# Events at the same instant: departures free capacity before the periodic
# sample, and arrivals see the freed capacity.
DEPARTURE, TICK, ARRIVAL = 0, 1, 2


def build_datacenter(num_hosts, num_vms, rng):
    """Creates alternating generic and power-curve hosts plus a random VM workload.

    Returns the hosts and a list of (arrival_time, departure_time, vm) tuples.
    """
    pms = []
    for i in range(num_hosts):
        host_cls = PowerPM if i % 2 else PM
        pms.append(host_cls(
            i,
            cpu_cap=config.HOST_CPU_CAPACITY,
            mem_cap=config.HOST_MEM_CAPACITY,
            bw_cap=config.HOST_BW_CAPACITY,
            storage_cap=config.HOST_STORAGE_CAPACITY,
        ))

    workload = []
    for i in range(num_vms):
        vm = VM(i, cpu_req=rng.choice(config.VM_MIPS), mem_req=config.VM_RAM,
                bw_req=config.VM_BW, storage_req=config.VM_SIZE)
        arrival = round(rng.uniform(0, config.MAX_ARRIVAL_TIME), 2)
        lifetime = round(rng.uniform(config.MIN_VM_LIFETIME, config.MAX_VM_LIFETIME), 2)
        workload.append((arrival, arrival + lifetime, vm))
    return pms, workload


def run_simulation(pms, workload, interval=config.SCHEDULING_INTERVAL, start_time=config.SIMULATION_START_TIME):
    """
    Replays the workload in time order against an energy-aware policy.

    VMs that cannot be placed on arrival wait in a queue. Only a departure
    frees capacity, so the queue is retried after each departure; a VM still
    waiting at its departure time is dropped. Returns the policy and a dict of
    placement counters plus ``placements``, the host id each placed VM ran on.
    """
    clock = SimulationClock(start_time)
    policy = EnergyAwareAllocationPolicy(pms, clock, start_time)
    stats = {'placed': 0, 'retried': 0, 'dropped': 0, 'placements': {}}

    events = []
    seq = 0
    for arrival, departure, vm in workload:
        heapq.heappush(events, (arrival, ARRIVAL, seq, vm))
        heapq.heappush(events, (departure, DEPARTURE, seq, vm))
        seq += 1

    end_time = max((departure for _, departure, _ in workload), default=start_time)
    tick = start_time + interval
    while interval > 0 and tick < end_time:
        heapq.heappush(events, (tick, TICK, seq, None))
        seq += 1
        tick += interval
    heapq.heappush(events, (end_time, TICK, seq, None))

    waiting = []
    while events:
        time, kind, _, vm = heapq.heappop(events)
        clock.advance_to(time)

        if kind == ARRIVAL:
            if policy.try_allocate_host(vm):
                stats['placed'] += 1
                stats['placements'][vm.id] = vm.host.id
            else:
                logger.debug("VM %s queued at t=%.2f", vm.id, time)
                waiting.append(vm)
        elif kind == DEPARTURE:
            if vm in waiting:
                waiting.remove(vm)
                stats['dropped'] += 1
                logger.warning("VM %s dropped: no host became available before t=%.2f", vm.id, time)
            elif vm.host is not None:
                policy.deallocate_host(vm)
                for queued in list(waiting):
                    if policy.try_allocate_host(queued):
                        waiting.remove(queued)
                        stats['retried'] += 1
                        stats['placements'][queued.id] = queued.host.id
        else:
            policy.update_all_hosts()

    return policy, stats


def collect_metrics(policy, placements=None):
    """Per-host and datacenter-wide metrics from a finished run.

    ``placements`` maps VM ids to the host they ran on, as returned by
    run_simulation.
    """
    vms = [{'vm_id': vm_id, 'host_id': host_id} for vm_id, host_id in sorted((placements or {}).items())]
    hosts = []
    for pm in policy.hosts:
        energy = policy.total_energy(pm.id)
        hosts.append({
            'host_id': pm.id,
            'avg_util_percent': policy.average_utilization(pm.id) * 100.0,
            'peak_util_percent': policy.peak_utilization(pm.id) * 100.0,
            'max_vms': policy.max_concurrent_vms(pm.id),
            'energy_j': energy,
            'energy_kwh': energy / config.JOULES_PER_KWH,
        })

    total_energy = policy.total_energy_all()
    return {
        'hosts': hosts,
        'vms': vms,
        'hosts_utilized': policy.active_host_count(),
        'total_hosts': len(policy.hosts),
        'total_energy_j': total_energy,
        'total_energy_kwh': total_energy / config.JOULES_PER_KWH,
    }


def write_summary_csv(metrics, path):
    """Writes the metrics as Type,ID,Metric,Value rows."""
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)

    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["Type", "ID", "Metric", "Value"])
        for vm in metrics['vms']:
            writer.writerow(["VM", vm['vm_id'], "Host", vm['host_id']])
        for m in metrics['hosts']:
            writer.writerow(["Host", m['host_id'], "AvgCPUUtilization", f"{m['avg_util_percent']:.2f}"])
            writer.writerow(["Host", m['host_id'], "PeakCPUUtilization", f"{m['peak_util_percent']:.2f}"])
            writer.writerow(["Host", m['host_id'], "MaxVMs", m['max_vms']])
            writer.writerow(["Host", m['host_id'], "EnergyConsumed", f"{m['energy_j']:.2f}"])
        writer.writerow(["Datacenter", "", "HostsUtilized", metrics['hosts_utilized']])
        writer.writerow(["Datacenter", "", "TotalEnergyKWh", f"{metrics['total_energy_kwh']:.6f}"])
    return path


def print_report(metrics, stats=None):
    print("\n--- Host Metrics ---")
    header = (
        f"{'HostID':<8} | {'Avg Util(%)':<12} | {'Peak Util(%)':<12} | "
        f"{'Max VMs':<8} | {'Energy(J)':<14} | {'Energy(kWh)':<12}"
    )
    print(header)
    print("-" * len(header))
    for m in metrics['hosts']:
        print(
            f"{m['host_id']:<8} | {m['avg_util_percent']:<12.2f} | {m['peak_util_percent']:<12.2f} | "
            f"{m['max_vms']:<8} | {m['energy_j']:<14.2f} | {m['energy_kwh']:<12.6f}"
        )

    print("\n--- Summary ---")
    print(f"{'Hosts Utilized':<30}: {metrics['hosts_utilized']}/{metrics['total_hosts']}")
    print(f"{'Total Energy Consumption':<30}: {metrics['total_energy_kwh']:.6f} kWh")
    if stats:
        print(f"{'VMs Placed':<30}: {stats['placed'] + stats['retried']} ({stats['retried']} after waiting)")
        print(f"{'VMs Dropped':<30}: {stats['dropped']}")


def plot_utilization(policy):
    """Plots each host's utilization samples and its energy total."""
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(16, 6))

    for pm in policy.hosts:
        history = policy.utilization_history(pm.id)
        ax1.plot(range(len(history)), [u * 100 for u in history], marker='.', label=f'Host {pm.id}')
    ax1.set_title('Utilization History', fontsize=14)
    ax1.set_xlabel('Sample', fontsize=12)
    ax1.set_ylabel('%', fontsize=12)
    ax1.xaxis.set_major_locator(MaxNLocator(integer=True))
    ax1.legend()

    host_ids = [str(pm.id) for pm in policy.hosts]
    ax2.bar(host_ids, [policy.total_energy(pm.id) for pm in policy.hosts], color='#2ca02c')
    ax2.set_title('Energy per Host (J)', fontsize=14)
    ax2.set_xlabel('Host', fontsize=12)

    plt.tight_layout()
    plt.show()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Energy-aware VM allocation simulation")
    parser.add_argument("--hosts", type=int, default=config.NUM_HOSTS, help="Number of hosts")
    parser.add_argument("--vms", type=int, default=config.NUM_VMS, help="Number of VMs")
    parser.add_argument("--seed", type=int, default=config.SEED_NUMBER, help="Random seed")
    parser.add_argument("--interval", type=float, default=config.SCHEDULING_INTERVAL,
                        help="Seconds between periodic metric updates")
    parser.add_argument("--plot", action="store_true", default=config.PLOT_UTILIZATION,
                        help="Plot utilization history when the run ends")
    parser.add_argument("--summary-csv", nargs="?", const=config.SUMMARY_CSV_FILE, default=None,
                        help=f"Write Type,ID,Metric,Value rows (default path: {config.SUMMARY_CSV_FILE})")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)]
    )

    # Reproducibility
    rng = random.Random(args.seed if config.USE_RANDOM_SEED else None)

    logger.info("Setting up %d hosts and %d VMs...", args.hosts, args.vms)
    pms, workload = build_datacenter(args.hosts, args.vms, rng)
    policy, stats = run_simulation(pms, workload, interval=args.interval)

    metrics = collect_metrics(policy, stats['placements'])
    print_report(metrics, stats)
    if args.summary_csv:
        write_summary_csv(metrics, args.summary_csv)
        logger.info("Detailed metrics saved to %s", args.summary_csv)
    if args.plot:
        plot_utilization(policy)


if __name__ == '__main__':
    main()

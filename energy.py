# file: energy.py

import logging

import config
from exceptions import InvalidTimeDelta

logger = logging.getLogger(__name__)


def power_draw(host, utilization):
    """
    Instantaneous power in watts for a host at the given utilization.
    Hosts exposing ``reported_power`` supply their own curve; every other
    host uses the linear idle-to-peak fallback.
    """
    reported_power = getattr(host, "reported_power", None)
    if callable(reported_power):
        return reported_power(utilization)
    return config.FALLBACK_IDLE_POWER + (config.FALLBACK_PEAK_POWER - config.FALLBACK_IDLE_POWER) * utilization


def update_energy(record, host, utilization, time_delta):
    """Adds ``power * time_delta`` joules to the host's energy accumulator."""
    if time_delta < 0:
        raise InvalidTimeDelta(record.host_id, time_delta)
    record.energy += power_draw(host, utilization) * time_delta


def check_interval(record, now):
    """Returns the elapsed time since the host's last update, rejecting negative intervals."""
    time_delta = now - record.last_update_time
    if time_delta < 0:
        raise InvalidTimeDelta(record.host_id, time_delta)
    return time_delta


def account_interval(record, host, utilization, now):
    """
    Closes the interval [last_update_time, now] at a constant utilization.
    Utilization is assumed piecewise-constant between events, so this must
    run once per state-changing event, before the host's load changes.
    """
    time_delta = check_interval(record, now)
    update_energy(record, host, utilization, time_delta)
    record.last_update_time = now
    logger.debug("Host %s: %.2f s at %.2f%% utilization, energy now %.2f J",
                 record.host_id, time_delta, utilization * 100, record.energy)
    return time_delta

# file: config.py

import os

# General
USE_RANDOM_SEED = True
SEED_NUMBER = 42
LOG_LEVEL = "INFO"
PLOT_UTILIZATION = False
SUMMARY_CSV_FILE = os.path.join("results", "summary.csv")

# Datacenter
NUM_HOSTS = 5
HOST_CPU_CAPACITY = 4000  # MIPS
HOST_MEM_CAPACITY = 16384  # MB
HOST_BW_CAPACITY = 10000
HOST_STORAGE_CAPACITY = 1000000

# Workload
NUM_VMS = 10
VM_MIPS = [1000, 1500, 2000, 2500, 3000]
VM_RAM = 512
VM_BW = 1000
VM_SIZE = 10000
MAX_ARRIVAL_TIME = 50.0
MIN_VM_LIFETIME = 20.0
MAX_VM_LIFETIME = 200.0

# Simulation parameters
SCHEDULING_INTERVAL = 10.0  # Seconds between periodic metric updates
SIMULATION_START_TIME = 0.0

# Energy model (watts, seconds, joules)
FALLBACK_IDLE_POWER = 100.0
FALLBACK_PEAK_POWER = 200.0
POWER_CURVE_IDLE = 150.0
POWER_CURVE_PEAK = 300.0
JOULES_PER_KWH = 3600000.0

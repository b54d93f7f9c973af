# Simulation Configuration

# ---------------------------------------------------------
# 1. Departments (Name -> Capacity)
# Order matters: departments are processed in this order every tick.
# ---------------------------------------------------------
DEPARTMENTS = {
    'ER': 8,
    'X-Ray': 3,
    'MRI': 1,
    'UltraSound': 2,
    'Surgery': 3,
}

# Every generated treatment plan starts here
ER_DEPARTMENT = 'ER'

# ---------------------------------------------------------
# 2. Priority 1 Thresholds (Ticks)
# ---------------------------------------------------------
# Current wait above this forces a priority 1 patient into treatment
STARVATION_THRESHOLD = 100

# Total wait above this counts the patient as "at risk" in the report
CRITICAL_WAIT_THRESHOLD = 500

# Total wait at or below this counts as "treated quickly"
FAST_TREATMENT_THRESHOLD = 100

# ---------------------------------------------------------
# 3. Timing
# ---------------------------------------------------------
# Seconds of wall-clock pause between ticks (0 = run flat out)
DEFAULT_TICK_DELAY = 0.0

# ---------------------------------------------------------
# 4. Patient Generator
# ---------------------------------------------------------
# Average ticks between arrivals
ARRIVAL_INTERVAL = 5

# Percent chance of priority 1 / priority 2 (remainder is priority 3)
PROB_PRI1 = 10
PROB_PRI2 = 30

# Treatment duration per department: (mean ticks, std dev)
TREATMENT_DURATIONS = {
    'ER': (20, 8),
    'X-Ray': (10, 4),
    'MRI': (30, 10),
    'UltraSound': (15, 5),
    'Surgery': (60, 20),
}

# Number of follow-up treatments after the ER (PMF)
EXTRA_TREATMENTS_PMF = {0: 0.45, 1: 0.35, 2: 0.15, 3: 0.05}

FIRST_NAMES = [
    'Aroha', 'Ben', 'Chloe', 'Daniel', 'Ella', 'Finn', 'Grace', 'Hemi',
    'Isla', 'Jack', 'Kiri', 'Liam', 'Mia', 'Noah', 'Olivia', 'Pita',
]

LAST_NAMES = [
    'Anderson', 'Brown', 'Campbell', 'Davies', 'Edwards', 'Fraser', 'Gray',
    'Harris', 'Johnson', 'King', 'Lee', 'Martin', 'Ngata', 'Parata',
    'Smith', 'Taylor', 'Walker', 'Wilson',
]

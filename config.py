# config.py

# Default settings (percentages are whole numbers, e.g. 7 means 7%)
DEFAULT_CURRENT_RATE = 7.0
DEFAULT_SWR = 4.0
DEFAULT_YEARLY_CONTRIBUTION = 0.0
DEFAULT_MONTHLY_SPEND = 0.0
DEFAULT_INFLATION_RATE = 3.0
DEFAULT_BASE_MONTHLY_BUDGET = 3000.0
DEFAULT_SPENDING_GROWTH_RATE = 2.0

DEFAULT_SETTINGS = {
    "current_rate": DEFAULT_CURRENT_RATE,
    "swr": DEFAULT_SWR,
    "yearly_contribution": DEFAULT_YEARLY_CONTRIBUTION,
    "birth_date": None,
    "monthly_spend": DEFAULT_MONTHLY_SPEND,
    "inflation_rate": DEFAULT_INFLATION_RATE,
    "base_monthly_budget": DEFAULT_BASE_MONTHLY_BUDGET,
    "spending_growth_rate": DEFAULT_SPENDING_GROWTH_RATE,
}

# Investment assumption presets
SCENARIO_TEMPLATES = {
    "Conservative": {"current_rate": 5.0, "swr": 3.5, "inflation_rate": 3.0},
    "Moderate": {"current_rate": 7.0, "swr": 4.0, "inflation_rate": 3.0},
    "Aggressive": {"current_rate": 9.0, "swr": 4.5, "inflation_rate": 2.5},
    "High Inflation": {"current_rate": 7.0, "swr": 3.5, "inflation_rate": 5.0},
}

# Line colors assigned to compared scenarios, in order
SCENARIO_COLORS = (
    "#10b981",
    "#f59e0b",
    "#8b5cf6",
    "#ef4444",
    "#06b6d4",
    "#ec4899",
    "#84cc16",
    "#f97316",
)
DEFAULT_COMPARED_SCENARIOS = ("Conservative", "Moderate", "Aggressive")

# Engine constants
MS_PER_YEAR = 365.25 * 24 * 60 * 60 * 1000
SECONDS_PER_YEAR = 365.25 * 24 * 60 * 60
PROJECTION_YEARS = 60
COAST_FI_SEARCH_YEARS = 100
DEFAULT_RETIREMENT_AGE = 65
DEFAULT_YEARS_TO_RETIREMENT = 30
NOW_LABEL = "Now"

# Spending status tolerance (monthly spend up to 110% of budget is "slightly over")
SLIGHTLY_OVER_BUDGET_FACTOR = 1.1

# Spending-level ladder: (level, name, net worth threshold)
LEVEL_THRESHOLDS = (
    (1, "Starter", 0),
    (2, "Saver", 10_000),
    (3, "Builder", 25_000),
    (4, "Momentum", 50_000),
    (5, "Foundation", 75_000),
    (6, "Traction", 100_000),
    (7, "Accelerator", 150_000),
    (8, "Velocity", 200_000),
    (9, "Milestone", 250_000),
    (10, "Cruising", 300_000),
    (11, "Advancing", 350_000),
    (12, "Thriving", 400_000),
    (13, "Flourishing", 450_000),
    (14, "Half Million", 500_000),
    (15, "Expanding", 550_000),
    (16, "Growing", 600_000),
    (17, "Ascending", 650_000),
    (18, "Rising", 700_000),
    (19, "Surging", 750_000),
    (20, "Climbing", 800_000),
    (21, "Soaring", 850_000),
    (22, "Elevating", 900_000),
    (23, "Approaching", 950_000),
    (24, "Millionaire", 1_000_000),
    (25, "Established", 1_100_000),
    (26, "Prospering", 1_200_000),
    (27, "Abundant", 1_300_000),
    (28, "Wealthy", 1_400_000),
    (29, "Accomplished", 1_500_000),
    (30, "Distinguished", 1_750_000),
    (31, "Double Million", 2_000_000),
    (32, "Exceptional", 2_250_000),
    (33, "Remarkable", 2_500_000),
    (34, "Outstanding", 2_750_000),
    (35, "Triple Million", 3_000_000),
    (36, "Elite", 3_500_000),
    (37, "Premier", 4_000_000),
    (38, "Pinnacle", 4_500_000),
    (39, "Five Million", 5_000_000),
    (40, "Apex", 6_000_000),
    (41, "Summit", 7_000_000),
    (42, "Zenith", 8_000_000),
    (43, "Crown", 9_000_000),
    (44, "Decamillionaire", 10_000_000),
    (45, "Titan", 15_000_000),
    (46, "Magnate", 20_000_000),
    (47, "Mogul", 30_000_000),
    (48, "Tycoon", 50_000_000),
    (49, "Dynasty", 75_000_000),
    (50, "Legacy", 100_000_000),
)

# Input validation ranges
RATE_MIN = 0.0
RATE_MAX = 100.0
SWR_MAX = 20.0
AGE_RANGE = (0, 120)

# Real-time display cadence
REALTIME_REFRESH_SECONDS = 0.05

# UI tuning constants
RATE_STEP = 0.5
SWR_STEP = 0.1
CONTRIBUTION_STEP = 1000.0
SPEND_STEP = 100.0
ENTRY_STEP = 1000.0

"""
Planning configuration and business constants.

Edit these values to change labor planning rules. Deployment settings
(API host, port, log level) are read from environment variables.
"""

import os

# ============================================
# LABOR STANDARDS
# ============================================
# Fixed shift length assumed when converting labor hours into workers
STANDARD_SHIFT_HOURS = 8

# Average wage used for plan-level cost estimates (not per-worker rates)
AVERAGE_HOURLY_RATE = 25.0

# ============================================
# STAFFING CLASSIFICATION
# ============================================
# Utilization = required hours * 100 / available hours
UNDERSTAFFED_THRESHOLD = 85.0
OVERSTAFFED_THRESHOLD = 110.0

# Recommendations warn when a category needs more workers than this
HIGH_STAFFING_WARNING_WORKERS = 10

# ============================================
# FORECASTING
# ============================================
ACCURACY_THRESHOLD = 85.0
MOVING_AVERAGE_WINDOW = 7
CONFIDENCE_Z_SCORE = 1.96

# Model label recorded per forecast period. The numeric computation is
# the same for every period; the label is metadata.
FORECASTING_MODELS = {
    'HOURLY': 'EXPONENTIAL_SMOOTHING',
    'DAILY': 'MOVING_AVERAGE',
    'WEEKLY': 'WEIGHTED_MOVING_AVERAGE',
    'MONTHLY': 'SEASONAL_DECOMPOSITION',
}

DEFAULT_MODEL_PARAMETERS = {
    'alpha': 0.3,
    'window_size': 7,
    'seasonality': 7,
}

# Attached to freshly generated forecasts until an evaluation replaces them
BASELINE_ACCURACY_METRICS = {
    'accuracy': 90.0,
    'mae': 5.0,
    'mse': 25.0,
}

# ============================================
# ALLOCATION
# ============================================
# Only these shifts are picked by automatic allocation, in tie-break order
AUTO_ALLOCATION_SHIFTS = ('DAY_SHIFT', 'EVENING_SHIFT', 'NIGHT_SHIFT')

# ============================================
# API
# ============================================
API_HOST = os.environ.get('WORKLOAD_API_HOST', '0.0.0.0')
API_PORT = int(os.environ.get('WORKLOAD_API_PORT', '8000'))
LOG_LEVEL = os.environ.get('WORKLOAD_LOG_LEVEL', 'info')
API_PREFIX = '/api/v1/workload'

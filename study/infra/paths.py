from study.utilities.config import DATA_DIR

# Centralized paths for data files (single source of truth)
PLANS_FILE = DATA_DIR / 'plans.json'
SESSIONS_FILE = DATA_DIR / 'sessions.json'

__all__ = ['DATA_DIR', 'PLANS_FILE', 'SESSIONS_FILE']

"""
Commands Package

CLI commands organized by area:
- seed.py - Seeding runs and plans
- database.py - Schema creation and reset
- data.py - Reporting and maintenance of seeded data
"""

from .seed import run, plan
from .database import init, reset
from .data import stats, duplicates, fingerprint

__all__ = [
    'run',
    'plan',
    'init',
    'reset',
    'stats',
    'duplicates',
    'fingerprint',
]

"""
Database module for CertTrack

Contains seed data and database utilities.
"""
from certtrack.db.seed_data import seed_all, clear_all, DEMO_USERS

__all__ = ["seed_all", "clear_all", "DEMO_USERS"]

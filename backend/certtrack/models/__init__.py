# Re-export all models for convenient imports
from certtrack.models.user import User, UserRole
from certtrack.models.certification import Certification

__all__ = [
    "User",
    "UserRole",
    "Certification",
]

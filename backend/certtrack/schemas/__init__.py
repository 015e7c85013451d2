# Pydantic schemas
from certtrack.schemas.auth import (
    CamelModel,
    UserRegister,
    UserLogin,
    UserResponse,
    LoginResponse,
)
from certtrack.schemas.certification import (
    CertificationCreate,
    CertificationUpdate,
    CertificationResponse,
)
from certtrack.schemas.dashboard import (
    CertificationStats,
    UserSummary,
    AdminDashboard,
    UserDashboard,
    RenewalBoard,
    ExpiringBoard,
)

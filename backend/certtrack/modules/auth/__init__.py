# Authentication module

from certtrack.modules.auth.dependencies import (
    get_current_user,
    get_current_admin,
    get_today,
)

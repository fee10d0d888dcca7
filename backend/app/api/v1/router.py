"""
API v1 Main Router
Aggregates all v1 API endpoints into a single router.

Structure:
- /auth/* - Session endpoints (sign in, current session, sign out)
- /users/* - User accounts with role and profile
- /requests/* - Service requests and status statistics
- /activityLogs - Audit trail of request changes
- /mail - Email relay
"""

from fastapi import APIRouter

from app.api.v1 import activity_logs, auth, mail, requests, users


# Create main v1 router
# This router will be included in main.py with prefix /api/v1
api_router = APIRouter()


# Include session endpoints
# Endpoints: POST/GET/DELETE /auth/session
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentication"],
)


# Include user endpoints
# Endpoints: GET/POST /users, PUT/DELETE /users?id=, GET/PUT/DELETE /users/{id}
api_router.include_router(
    users.router,
    # prefix is already defined in users.router (/users)
)


# Include request endpoints
# Endpoints: GET/POST/PUT/DELETE /requests, GET /requests/stats
# Mutations append activity log entries
api_router.include_router(
    requests.router,
    # prefix is already defined in requests.router (/requests)
)


# Include activity log endpoints
# Endpoints: GET /activityLogs
api_router.include_router(
    activity_logs.router,
    # prefix is already defined in activity_logs.router (/activityLogs)
)


# Include mail relay endpoint
# Endpoints: POST /mail
api_router.include_router(
    mail.router,
    # prefix is already defined in mail.router (/mail)
)

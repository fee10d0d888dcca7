"""
Application Constants
Defines constant values used throughout the application.

This module contains all application-wide constants including:
- User roles and their default permissions
- Request statuses
- Activity log actions
"""

# User Roles
ROLE_USER = "user"  # Regular user, can file requests
ROLE_ADMIN = "admin"  # Back-office operator, full permissions

# Default permission actions seeded for each role
DEFAULT_ROLE_PERMISSIONS = {
    ROLE_USER: [
        "request:create",
        "request:read",
    ],
    ROLE_ADMIN: [
        "user:create",
        "user:read",
        "user:update",
        "user:delete",
        "request:create",
        "request:read",
        "request:update",
        "request:delete",
        "activity_log:read",
        "mail:send",
    ],
}

# Request Statuses
# No transition graph: any status may follow any other
STATUS_PENDING = "pending"
STATUS_IN_PROGRESS = "in-progress"
STATUS_COMPLETED = "completed"
STATUS_REJECTED = "rejected"

# Largest id a 64-bit integer column can hold
MAX_ID = 2**63 - 1

# Request description minimum length
REQUEST_DESCRIPTION_MIN_LENGTH = 10

# Activity Log Actions
ACTION_CREATE = "CREATE"
ACTION_UPDATE = "UPDATE"
ACTION_DELETE = "DELETE"

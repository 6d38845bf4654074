"""Role-based permission sets."""

from securebond.db.enums.auth import Role


# Roles that manage clients, bonds, payments and court dates
ROLES_CAN_MANAGE_CASES = {Role.ADMIN}

# Roles that can view audit logs / diagnostics
ROLES_CAN_VIEW_AUDIT = {Role.ADMIN, Role.MAINTENANCE}

# Roles that can view request performance metrics and detailed health
ROLES_CAN_VIEW_OPS = {Role.ADMIN, Role.MAINTENANCE}

# Roles that can read company configuration (admin may also edit it)
ROLES_CAN_VIEW_SETTINGS = {Role.ADMIN, Role.MAINTENANCE}
ROLES_CAN_MANAGE_SETTINGS = {Role.ADMIN}

# Roles that can view and acknowledge compliance alerts
ROLES_CAN_VIEW_ALERTS = {Role.ADMIN}

# Roles that manage staff accounts
ROLES_CAN_MANAGE_STAFF = {Role.ADMIN}

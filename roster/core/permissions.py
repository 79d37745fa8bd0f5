"""Role identifiers checked by the authorization guard.

Roles are flat uppercase strings; there is no hierarchy. Each admin operation
accepts ADMINISTRATOR or its operation-specific role.
"""

ADMINISTRATOR = "ADMINISTRATOR"

USERS_CANACCESSUSERS = "USERS_CANACCESSUSERS"
USERS_CANADDUSERS = "USERS_CANADDUSERS"
USERS_CANEDITUSERS = "USERS_CANEDITUSERS"
USERS_ACTIVATEUSERS = "USERS_ACTIVATEUSERS"

ROLES_CANACCESSROLES = "ROLES_CANACCESSROLES"
ROLES_CANADDROLES = "ROLES_CANADDROLES"
ROLES_CANEDITROLES = "ROLES_CANEDITROLES"
ROLES_CANDELETEROLES = "ROLES_CANDELETEROLES"

CAN_LIST_USERS = (ADMINISTRATOR, USERS_CANACCESSUSERS)
CAN_ADD_USERS = (ADMINISTRATOR, USERS_CANADDUSERS)
CAN_EDIT_USERS = (ADMINISTRATOR, USERS_CANEDITUSERS)
CAN_ACTIVATE_USERS = (ADMINISTRATOR, USERS_ACTIVATEUSERS)

CAN_LIST_ROLES = (ADMINISTRATOR, ROLES_CANACCESSROLES)
CAN_ADD_ROLES = (ADMINISTRATOR, ROLES_CANADDROLES)
CAN_EDIT_ROLES = (ADMINISTRATOR, ROLES_CANEDITROLES)
CAN_DELETE_ROLES = (ADMINISTRATOR, ROLES_CANDELETEROLES)

# Reading another user's role list
CAN_READ_OTHER_ROLES = (ADMINISTRATOR,)

# Descriptions used when seeding the built-in roles.
BUILTIN_ROLES: dict[str, str] = {
    ADMINISTRATOR: "Full access to every administrative operation",
    USERS_CANACCESSUSERS: "Can open the user list",
    USERS_CANADDUSERS: "Can add users",
    USERS_CANEDITUSERS: "Can edit users, reset passwords and assign roles",
    USERS_ACTIVATEUSERS: "Can activate and deactivate users",
    ROLES_CANACCESSROLES: "Can open the role list",
    ROLES_CANADDROLES: "Can add roles",
    ROLES_CANEDITROLES: "Can edit role descriptions",
    ROLES_CANDELETEROLES: "Can delete roles",
}

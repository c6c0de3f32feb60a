"""
Role permission matrix.

The user's role is resolved by the authentication layer and
passed in; this module only answers "may this role do that?".

    owner       everything
    accountant  manages financial data, no user/settings admin
    viewer      read only
"""

from factoryflow.models.enums import (
    PermissionAction as Action,
    PermissionModule as Module,
    UserRole,
)

ALL_ACTIONS = frozenset(Action)
CRUD_ACTIONS = frozenset(
    {Action.CREATE, Action.READ, Action.UPDATE, Action.DELETE}
)
READ_ONLY = frozenset({Action.READ})
READ_EXPORT = frozenset({Action.READ, Action.EXPORT})
NO_ACCESS: frozenset = frozenset()

ROLE_PERMISSIONS: dict[UserRole, dict[Module, frozenset]] = {
    UserRole.OWNER: {module: ALL_ACTIONS for module in Module},
    UserRole.ACCOUNTANT: {
        Module.DASHBOARD: READ_ONLY,
        Module.LEDGER: CRUD_ACTIONS,
        Module.CLIENTS: CRUD_ACTIONS,
        Module.PAYMENTS: CRUD_ACTIONS,
        Module.CHEQUES: CRUD_ACTIONS,
        Module.INVENTORY: CRUD_ACTIONS,
        Module.EMPLOYEES: CRUD_ACTIONS,
        Module.PARTNERS: CRUD_ACTIONS,
        Module.FIXED_ASSETS: CRUD_ACTIONS,
        Module.INVOICES: CRUD_ACTIONS | {Action.EXPORT},
        Module.REPORTS: READ_EXPORT,
        Module.USERS: NO_ACCESS,
        Module.SETTINGS: NO_ACCESS,
    },
    UserRole.VIEWER: {
        **{module: READ_ONLY for module in Module},
        Module.USERS: NO_ACCESS,
        Module.SETTINGS: NO_ACCESS,
    },
}


def has_permission(role, module, action) -> bool:
    """Unknown roles, modules or actions are denied."""
    try:
        role = UserRole(role)
        module = Module(module)
        action = Action(action)
    except ValueError:
        return False
    return action in ROLE_PERMISSIONS[role].get(module, NO_ACCESS)


def get_allowed_actions(role, module) -> set:
    try:
        return set(ROLE_PERMISSIONS[UserRole(role)].get(Module(module), NO_ACCESS))
    except ValueError:
        return set()


def can_access_module(role, module) -> bool:
    return has_permission(role, module, Action.READ)

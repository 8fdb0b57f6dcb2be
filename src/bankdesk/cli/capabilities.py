"""Role capability descriptors for the CLI session shell.

A session is one generic shell; what a role may do is plain data looked up
here, not behaviour inherited from a per-role subclass.
"""

from dataclasses import dataclass
from enum import Enum

import click


class Role(str, Enum):
    """Desk user role."""

    CUSTOMER = "customer"
    EMPLOYEE = "employee"
    MANAGER = "manager"


@dataclass(frozen=True)
class Capabilities:
    """Operations available to a role."""

    role: Role
    operations: frozenset[str]

    def allows(self, operation: str) -> bool:
        return operation in self.operations


_READ = frozenset({"account-show", "account-list", "history"})
_MONEY = frozenset({"credit", "debit", "transfer"})
_ADMIN = frozenset({"account-open", "account-close", "reconcile"})

ROLE_CAPABILITIES: dict[Role, Capabilities] = {
    Role.CUSTOMER: Capabilities(Role.CUSTOMER, _READ | _MONEY),
    Role.EMPLOYEE: Capabilities(Role.EMPLOYEE, _READ | frozenset({"account-open"})),
    Role.MANAGER: Capabilities(Role.MANAGER, _READ | _MONEY | _ADMIN),
}


def capabilities_for(role: Role | str) -> Capabilities:
    """Look up the capability descriptor of a role."""
    return ROLE_CAPABILITIES[Role(role)]


def require_capability(ctx: click.Context, operation: str) -> None:
    """Exit with a CLI error unless the session role may run the operation."""
    capabilities: Capabilities = ctx.obj["capabilities"]
    if not capabilities.allows(operation):
        click.echo(
            f"Error: Role '{capabilities.role.value}' is not allowed to run '{operation}'",
            err=True,
        )
        ctx.exit(1)

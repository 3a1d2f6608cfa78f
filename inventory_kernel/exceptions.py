"""
Typed exception hierarchy for the inventory kernel.

Every error carries a class-level ``code`` (machine-readable, stable) and
keeps its context as attributes rather than inside the message, so callers
catch by type and read structured data instead of parsing strings.

    InventoryKernelError (base)
    |
    +-- CommandError
    |   +-- UnknownCommandError
    |   +-- InvalidCommandError
    |
    +-- GuardError
    |   +-- StockExhaustedError
    |   +-- NothingCheckedOutError
    |   +-- StockFullError
    |
    +-- AuthError
        +-- InvalidCredentialsError
        +-- NotAuthenticatedError
        +-- PermissionDeniedError

A command that references an id missing from the store is NOT an error:
the store returns the unchanged state and nothing is raised.  Guard errors
are raised by the caller-side guards before a command reaches the store;
the store itself never raises them.

Error codes
-----------

Category | Code                  | When raised
---------|-----------------------|----------------------------------------------
Command  | UNKNOWN_COMMAND       | Object dispatched is not a registered command
         | INVALID_COMMAND       | ``{kind, payload}`` mapping cannot be parsed
Guard    | STOCK_EXHAUSTED       | Checkout with nothing remaining
         | NOTHING_CHECKED_OUT   | Accessory check-in with zero checked out
         | STOCK_FULL            | Component check-in at total quantity
Auth     | INVALID_CREDENTIALS   | Login with unknown user or wrong password
         | NOT_AUTHENTICATED     | Command submitted without a session
         | PERMISSION_DENIED     | Session user lacks the required privilege
"""


class InventoryKernelError(Exception):
    """
    Base exception for all inventory kernel errors.

    All subclasses must have a ``code`` class attribute for
    machine-readable error identification.
    """

    code: str = "INVENTORY_KERNEL_ERROR"


# Command-related exceptions


class CommandError(InventoryKernelError):
    """Base exception for malformed or unroutable commands."""

    code: str = "COMMAND_ERROR"


class UnknownCommandError(CommandError):
    """The dispatched object has no registered handler."""

    code: str = "UNKNOWN_COMMAND"

    def __init__(self, command_type: str):
        self.command_type = command_type
        super().__init__(f"No handler registered for command type: {command_type}")


class InvalidCommandError(CommandError):
    """A ``{kind, payload}`` mapping could not be turned into a command."""

    code: str = "INVALID_COMMAND"

    def __init__(self, kind: str | None, reason: str):
        self.kind = kind
        self.reason = reason
        super().__init__(f"Invalid command {kind!r}: {reason}")


# Caller-side guard exceptions


class GuardError(InventoryKernelError):
    """Base exception for quantity guards evaluated before dispatch."""

    code: str = "GUARD_ERROR"


class StockExhaustedError(GuardError):
    """Checkout requested when no units remain."""

    code: str = "STOCK_EXHAUSTED"

    def __init__(self, item_id: str, total_qty: int, remaining_qty: int):
        self.item_id = item_id
        self.total_qty = total_qty
        self.remaining_qty = remaining_qty
        super().__init__(
            f"No stock remaining for {item_id} "
            f"(remaining {remaining_qty} of {total_qty})"
        )


class NothingCheckedOutError(GuardError):
    """Accessory check-in requested when nothing is checked out."""

    code: str = "NOTHING_CHECKED_OUT"

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Nothing is checked out for {item_id}")


class StockFullError(GuardError):
    """Component check-in requested when remaining already equals total."""

    code: str = "STOCK_FULL"

    def __init__(self, item_id: str, total_qty: int):
        self.item_id = item_id
        self.total_qty = total_qty
        super().__init__(
            f"Stock for {item_id} is already at its total of {total_qty}"
        )


# Authentication / authorization exceptions (raised by collaborators)


class AuthError(InventoryKernelError):
    """Base exception for the mock authentication collaborators."""

    code: str = "AUTH_ERROR"


class InvalidCredentialsError(AuthError):
    """Login failed."""

    code: str = "INVALID_CREDENTIALS"

    def __init__(self, username: str):
        self.username = username
        super().__init__("Invalid username or password")


class NotAuthenticatedError(AuthError):
    """A command was submitted without an authenticated session."""

    code: str = "NOT_AUTHENTICATED"

    def __init__(self, command_kind: str):
        self.command_kind = command_kind
        super().__init__(f"Authentication required to issue {command_kind}")


class PermissionDeniedError(AuthError):
    """The session user lacks the privilege a command requires."""

    code: str = "PERMISSION_DENIED"

    def __init__(self, user_id: str, privilege: str, reason: str = ""):
        self.user_id = user_id
        self.privilege = privilege
        self.reason = reason
        super().__init__(
            f"User {user_id} lacks privilege {privilege}"
            + (f": {reason}" if reason else "")
        )

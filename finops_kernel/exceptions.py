"""
Typed Exception Hierarchy for the FinOps Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Every refused operation surfaces a precise failure kind.  Callers catch by
type and read structured attributes instead of parsing messages:

    try:
        platform.complete_transaction(caller, tx_id)
    except TransactionNotActiveError as e:
        api_response(code=e.code, status=e.status)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from FinOpsKernelError:

    FinOpsKernelError (base)
    |
    +-- NotFoundError
    |   +-- UserNotFoundError
    |   +-- TransactionNotFoundError
    |   +-- ApprovalNotFoundError
    |
    +-- UserError
    |   +-- UserAlreadyRegisteredError
    |   +-- UserNotRegisteredError
    |   +-- UserInactiveError
    |   +-- InvalidIdentityError
    |   +-- InvalidRoleError
    |
    +-- AuthorizationError
    |   +-- UnauthorizedError
    |   +-- NotOwnerError
    |
    +-- TransactionError
    |   +-- InvalidAmountError
    |   +-- InvalidRecipientError
    |   +-- TransactionNotActiveError
    |   +-- TransactionNotPendingError
    |   +-- InvalidTransactionTransitionError
    |
    +-- ApprovalError
    |   +-- ApprovalAlreadyProcessedError
    |   +-- DuplicateApprovalRequestError
    |
    +-- AuditError
        +-- EventChainBrokenError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                           | When Raised
----------------|--------------------------------|------------------------------------
Lookup          | USER_NOT_FOUND                 | Identity not registered (lookup)
                | TRANSACTION_NOT_FOUND          | Unknown transaction id
                | APPROVAL_NOT_FOUND             | Unknown approval id
----------------|--------------------------------|------------------------------------
User            | ALREADY_REGISTERED             | Duplicate identity registration
                | NOT_REGISTERED                 | Unknown caller creates transaction
                | INACTIVE                       | Inactive caller creates transaction
                | INVALID_IDENTITY               | Registering the null identity
                | INVALID_ROLE                   | Role value outside regular/manager/admin
----------------|--------------------------------|------------------------------------
Authorization   | UNAUTHORIZED                   | Role requirement not met
                | NOT_OWNER                      | Caller is not the transaction owner
----------------|--------------------------------|------------------------------------
Transaction     | INVALID_AMOUNT                 | Amount not a positive uint256
                | INVALID_RECIPIENT              | Null (or unregistered) recipient
                | NOT_ACTIVE                     | Completing a non-Active transaction
                | NOT_PENDING                    | Approval for a settled transaction
                | INVALID_TRANSACTION_TRANSITION | Illegal status change
----------------|--------------------------------|------------------------------------
Approval        | ALREADY_PROCESSED              | Re-processing a resolved approval
                | DUPLICATE_APPROVAL_REQUEST     | A pending approval already exists
----------------|--------------------------------|------------------------------------
Audit           | EVENT_CHAIN_BROKEN             | Notification log hash mismatch

===============================================================================
DESIGN DECISIONS
===============================================================================

1. Every failure means the requested transition was refused and state is
   unchanged.  There is no recoverable/fatal split at this layer.

2. ``code`` is a class attribute so it can be read without instantiation
   (``UnauthorizedError.code``) and documented statically.

3. NotFoundError groups the three lookup failures so callers that only
   care about "unknown id" can catch one type.
"""


class FinOpsKernelError(Exception):
    """
    Base exception for all FinOps kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "FINOPS_KERNEL_ERROR"


# Lookup exceptions


class NotFoundError(FinOpsKernelError):
    """Base exception for lookups of unknown users, transactions or approvals."""

    code: str = "NOT_FOUND"


class UserNotFoundError(NotFoundError):
    """No user is registered under the given identity."""

    code: str = "USER_NOT_FOUND"

    def __init__(self, identity: str):
        self.identity = identity
        super().__init__(f"User not found: {identity}")


class TransactionNotFoundError(NotFoundError):
    """Transaction with given ID was not found."""

    code: str = "TRANSACTION_NOT_FOUND"

    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction not found: {transaction_id}")


class ApprovalNotFoundError(NotFoundError):
    """Approval with given ID was not found."""

    code: str = "APPROVAL_NOT_FOUND"

    def __init__(self, approval_id: int):
        self.approval_id = approval_id
        super().__init__(f"Approval not found: {approval_id}")


# User registry exceptions


class UserError(FinOpsKernelError):
    """Base exception for user registry errors."""

    code: str = "USER_ERROR"


class UserAlreadyRegisteredError(UserError):
    """Identity is already present in the registry."""

    code: str = "ALREADY_REGISTERED"

    def __init__(self, identity: str):
        self.identity = identity
        super().__init__(f"User already registered: {identity}")


class UserNotRegisteredError(UserError):
    """Caller is not a registered user."""

    code: str = "NOT_REGISTERED"

    def __init__(self, identity: str):
        self.identity = identity
        super().__init__(f"User not registered: {identity}")


class UserInactiveError(UserError):
    """Caller is registered but not active."""

    code: str = "INACTIVE"

    def __init__(self, identity: str):
        self.identity = identity
        super().__init__(f"User is inactive: {identity}")


class InvalidIdentityError(UserError):
    """The null identity cannot be registered."""

    code: str = "INVALID_IDENTITY"

    def __init__(self, identity: str | None):
        self.identity = identity
        super().__init__(f"Invalid identity: {identity!r}")


class InvalidRoleError(UserError):
    """Role value is not one of the known roles."""

    code: str = "INVALID_ROLE"

    def __init__(self, role: object):
        self.role = role
        super().__init__(f"Invalid role: {role!r}")


# Authorization exceptions


class AuthorizationError(FinOpsKernelError):
    """Base exception for role and ownership failures."""

    code: str = "AUTHORIZATION_ERROR"


class UnauthorizedError(AuthorizationError):
    """
    Caller does not hold the role an operation requires.

    ``required`` names the capability: "admin" for registry mutations,
    "approver" for approval processing.
    """

    code: str = "UNAUTHORIZED"

    _MESSAGES = {
        "admin": "Admin role required",
        "approver": "Not authorized",
    }

    def __init__(self, identity: str, required: str):
        self.identity = identity
        self.required = required
        message = self._MESSAGES.get(required, f"{required} role required")
        super().__init__(f"{message}: {identity}")


class NotOwnerError(AuthorizationError):
    """Caller is not the owner (sender) of the transaction."""

    code: str = "NOT_OWNER"

    def __init__(self, transaction_id: int, identity: str):
        self.transaction_id = transaction_id
        self.identity = identity
        super().__init__(
            f"Not transaction owner: {identity} does not own transaction {transaction_id}"
        )


# Transaction exceptions


class TransactionError(FinOpsKernelError):
    """Base exception for transaction ledger errors."""

    code: str = "TRANSACTION_ERROR"


class InvalidAmountError(TransactionError):
    """Amount is zero, negative, non-integral, or exceeds uint256."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, amount: object):
        self.amount = amount
        super().__init__(f"Amount must be greater than 0: {amount!r}")


class InvalidRecipientError(TransactionError):
    """Recipient is the null identity or fails the recipient policy."""

    code: str = "INVALID_RECIPIENT"

    def __init__(self, recipient: str | None, reason: str = "null identity"):
        self.recipient = recipient
        self.reason = reason
        super().__init__(f"Invalid recipient address {recipient!r}: {reason}")


class TransactionNotActiveError(TransactionError):
    """Completion attempted on a transaction that is not Active."""

    code: str = "NOT_ACTIVE"

    def __init__(self, transaction_id: int, status: str):
        self.transaction_id = transaction_id
        self.status = status
        super().__init__(
            f"Transaction not active: {transaction_id} is {status}"
        )


class TransactionNotPendingError(TransactionError):
    """Approval requested for a transaction that has left Pending."""

    code: str = "NOT_PENDING"

    def __init__(self, transaction_id: int, status: str):
        self.transaction_id = transaction_id
        self.status = status
        super().__init__(
            f"Transaction not pending: {transaction_id} is {status}"
        )


class InvalidTransactionTransitionError(TransactionError):
    """Status change not permitted by the transaction state machine."""

    code: str = "INVALID_TRANSACTION_TRANSITION"

    def __init__(self, transaction_id: int, from_status: str, to_status: str):
        self.transaction_id = transaction_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Invalid transition for transaction {transaction_id}: "
            f"{from_status} -> {to_status}"
        )


# Approval exceptions


class ApprovalError(FinOpsKernelError):
    """Base exception for approval workflow errors."""

    code: str = "APPROVAL_ERROR"


class ApprovalAlreadyProcessedError(ApprovalError):
    """Approval has already been resolved."""

    code: str = "ALREADY_PROCESSED"

    def __init__(self, approval_id: int, status: str):
        self.approval_id = approval_id
        self.status = status
        super().__init__(
            f"Approval already processed: {approval_id} is {status}"
        )


class DuplicateApprovalRequestError(ApprovalError):
    """A pending approval already exists for the transaction."""

    code: str = "DUPLICATE_APPROVAL_REQUEST"

    def __init__(self, transaction_id: int, existing_approval_id: int):
        self.transaction_id = transaction_id
        self.existing_approval_id = existing_approval_id
        super().__init__(
            f"Transaction {transaction_id} already has pending approval "
            f"{existing_approval_id}"
        )


# Audit exceptions


class AuditError(FinOpsKernelError):
    """Base exception for notification log integrity errors."""

    code: str = "AUDIT_ERROR"


class EventChainBrokenError(AuditError):
    """
    Notification log hash chain validation failed.

    Indicates a persisted event was modified or removed after the fact.
    """

    code: str = "EVENT_CHAIN_BROKEN"

    def __init__(self, seq: int, expected_hash: str, actual_hash: str | None):
        self.seq = seq
        self.expected_hash = expected_hash
        self.actual_hash = actual_hash
        super().__init__(
            f"Event chain broken at seq {seq}: "
            f"expected {expected_hash}, got {actual_hash}"
        )

"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as a row owned by someone else."""


class StoreError(DomainError):
    """A store operation failed; wraps the underlying driver error."""


class ImportCommitError(DomainError):
    """A merge step failed while committing an import."""

    def __init__(self, step: str, cause: Exception):
        super().__init__(f"Import failed while writing {step}: {cause}")
        self.step = step
        self.cause = cause


class MigrationError(DomainError):
    """Local data could not be migrated to the remote store."""


def account_not_found(account_id: str) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def distribution_not_found(distribution_id: str) -> str:
    """Return message for missing profit distribution."""
    return f"Profit distribution {distribution_id} not found"


def bank_account_not_found(bank_account_id: str) -> str:
    """Return message for missing bank account."""
    return f"Bank account {bank_account_id} not found"


def profile_not_found(owner_id: str) -> str:
    """Return message for missing owner profile."""
    return f"Profile for owner {owner_id} not found"


def owned_by_other(kind: str, row_id: str) -> str:
    """Return message when a row id is already used by another owner."""
    return f"{kind} '{row_id}' belongs to another owner"


def unresolved_account_reference(transaction_id: str, account_id: str) -> str:
    """Return message for an allocation pointing at an unknown account."""
    return f"Transaction {transaction_id} allocates to unknown account '{account_id}'"


def store_failure(operation: str, cause: Exception) -> str:
    """Return message wrapping a store driver error."""
    return f"Failed to {operation}: {cause}"


def account_type_conflict(account_id: str, existing_type: str, incoming_type: str) -> str:
    """Return message when an incoming account id is held by a bucket of another type."""
    return (
        f"Account '{account_id}' is a {existing_type} account; "
        f"cannot import it as {incoming_type}"
    )

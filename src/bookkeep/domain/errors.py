"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain record does not exist."""


class StoreUnavailableError(DomainError):
    """The record store could not be read or written."""


def missing_required_fields(kind: str, fields: list[str]) -> str:
    """Return message for a record submitted without its required fields."""
    return f"Please fill in all required fields for {kind}: {', '.join(fields)}"


def record_not_found(kind: str, record_id: int) -> str:
    """Return message for missing record."""
    return f"No {kind} record with id {record_id}"


def store_unavailable(key: str, action: str) -> str:
    """Return message when the record store fails."""
    return f"Record store unavailable while trying to {action} '{key}'"


def unknown_record_kind(kind: str) -> str:
    """Return message for an unrecognised record category."""
    return f"Unknown record kind '{kind}'"

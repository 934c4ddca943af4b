"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error (e.g. empty or oversized comment content)."""

    pass


class UnauthenticatedError(DomainError):
    """Raised when a write is attempted without a signed-in user."""

    def __init__(self, action: str = "perform this action"):
        super().__init__(f"Must be authenticated to {action}")


class ForbiddenError(DomainError):
    """Raised when a user attempts to change content they don't own."""

    def __init__(self, resource: str, resource_id: str, user_id: str):
        self.resource = resource
        self.resource_id = resource_id
        self.user_id = user_id
        super().__init__(
            f"User {user_id} is not allowed to modify {resource} {resource_id}"
        )


class InvalidThreadError(DomainError):
    """Raised when a reply would break two-level threading."""

    pass


class ContentDeletedError(DomainError):
    """Raised when attempting to edit deleted content."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"Cannot edit deleted {resource} {resource_id}")


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class TransientStoreError(DomainError):
    """Raised when the store or the network fails in a way worth retrying."""

    retryable = True

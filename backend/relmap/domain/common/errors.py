"""Domain error types."""


class DomainError(Exception):
    """Base domain error."""

    error_code = "DOMAIN_ERROR"


class NotFoundError(DomainError):
    """Resource not found."""

    error_code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} with id {identifier} not found")


class ValidationError(DomainError):
    """Validation error."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidRelationshipType(ValidationError):
    """Relationship type is not one of the known types."""

    error_code = "INVALID_RELATIONSHIP_TYPE"

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid relationship type: {value!r}")


class InvalidSupportRole(ValidationError):
    """Support role tag is not one of the known roles."""

    error_code = "INVALID_SUPPORT_ROLE"

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid support role: {value!r}")


class RelationshipNotFound(NotFoundError):
    """Person does not exist or belongs to another owner."""

    error_code = "RELATIONSHIP_NOT_FOUND"

    def __init__(self, person_id: str):
        super().__init__("Relationship", person_id)


class PersistenceFailure(DomainError):
    """Storage layer failed; the underlying error is chained as __cause__."""

    error_code = "PERSISTENCE_FAILURE"

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Persistence failure during {operation}")

"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInputError(DomainException):
    """Request payload or identifier is absent or malformed"""

    pass


class NotFoundError(DomainException):
    """Referenced assessment or loan application does not exist"""

    def __init__(self, entity: str, entity_id: int):
        super().__init__(f"{entity} not found with ID: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class DuplicateError(DomainException):
    """An active loan application already exists for the same email"""

    @classmethod
    def for_email(cls, email: str) -> "DuplicateError":
        return cls(f"An active loan application already exists for email: {email}")


class InternalError(DomainException):
    """Unexpected failure in the store or engine"""

    pass

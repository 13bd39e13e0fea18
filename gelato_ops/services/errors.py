"""Domain error taxonomy raised by services and mapped to HTTP by the API layer."""


class ServiceError(RuntimeError):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Malformed or semantically invalid input."""
    status_code = 400


class NotFoundError(ServiceError):
    status_code = 404

    @classmethod
    def for_resource(cls, resource: str, identifier) -> "NotFoundError":
        return cls(f"{resource} {identifier} not found")

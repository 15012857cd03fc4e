"""
Service Errors

Typed failures returned by every core operation. Routers convert them into
structured HTTP responses: {"error": <error_code>, "message": <message>}.
"""


class ServiceError(Exception):
    """Base exception for portal service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


# ============================================
# Input & Uniqueness
# ============================================


class ValidationError(ServiceError):
    """Raised for malformed or missing input the user can correct."""

    def __init__(self, message: str):
        super().__init__(message=message, error_code="VALIDATION_ERROR", status_code=400)


class DuplicateIdentityError(ServiceError):
    """Raised when an email is already registered in the role's namespace."""

    def __init__(self, email: str | None = None):
        message = "An account with this email already exists."
        super().__init__(message=message, error_code="DUPLICATE_IDENTITY", status_code=409)
        self.email = email


class ConflictError(ServiceError):
    """Raised when a write would violate a uniqueness invariant."""

    def __init__(
        self,
        message: str = "You have already applied for this posting.",
        error_code: str = "DUPLICATE_APPLICATION",
    ):
        super().__init__(message=message, error_code=error_code, status_code=409)


class InvalidStatusError(ServiceError):
    """Raised when a requested status value is not part of the entity's state set."""

    def __init__(self, value: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid status '{value}'. Allowed values: {allowed}",
            error_code="INVALID_STATUS",
            status_code=422,
        )


class InvalidStatusTransitionError(ServiceError):
    """Raised when a lifecycle transition is not allowed from the current state."""

    def __init__(self, entity: str, current_status: str, event: str):
        self.entity = entity
        self.current_status = current_status
        self.event = event
        super().__init__(
            message=f"Cannot {event} {entity} in status: {current_status}.",
            error_code="INVALID_STATUS_TRANSITION",
            status_code=409,
        )


# ============================================
# Authorization
# ============================================


class ForbiddenError(ServiceError):
    """Raised when the actor's role or state does not permit the operation."""

    def __init__(self, message: str = "You do not have permission to perform this action."):
        super().__init__(message=message, error_code="FORBIDDEN", status_code=403)


class ForbiddenCrossTenantError(ForbiddenError):
    """Raised when an actor targets a resource owned by someone else."""

    def __init__(self, message: str = "This resource belongs to another account."):
        super().__init__(message=message)
        self.error_code = "FORBIDDEN_CROSS_TENANT"


class NotFoundError(ServiceError):
    """Raised when a referenced entity does not exist."""

    def __init__(self, entity: str, entity_id: int | None = None):
        self.entity = entity
        self.entity_id = entity_id
        label = entity.capitalize()
        message = f"{label} {entity_id} not found" if entity_id else f"{label} not found"
        super().__init__(
            message=message,
            error_code=f"{entity.upper()}_NOT_FOUND",
            status_code=404,
        )


# ============================================
# Authentication
# ============================================


class InvalidCredentialsError(ServiceError):
    """Raised when email/password do not match an account of the requested role."""

    def __init__(self):
        super().__init__(
            message="Invalid email or password.",
            error_code="INVALID_CREDENTIALS",
            status_code=401,
        )


class InvalidTokenError(ServiceError):
    """Raised when a bearer token is missing, malformed, expired or stale."""

    def __init__(self, message: str = "Invalid or expired authentication token."):
        super().__init__(message=message, error_code="INVALID_TOKEN", status_code=401)


class AccountBlockedError(ServiceError):
    """Raised when a blocked account tries to authenticate or act."""

    def __init__(self):
        super().__init__(
            message="Your account has been blocked. Please contact the administrator.",
            error_code="ACCOUNT_BLOCKED",
            status_code=403,
        )


class AccountPendingApprovalError(ServiceError):
    """Raised when an account that is not yet approved tries to log in."""

    def __init__(self):
        super().__init__(
            message="Your account is pending approval. Please wait for admin verification.",
            error_code="ACCOUNT_PENDING_APPROVAL",
            status_code=403,
        )


# ============================================
# Infrastructure
# ============================================


class StoreUnavailableError(ServiceError):
    """Raised when the database cannot be reached. Not retried by the core."""

    def __init__(self):
        super().__init__(
            message="The service is temporarily unavailable. Please try again later.",
            error_code="STORE_UNAVAILABLE",
            status_code=503,
        )

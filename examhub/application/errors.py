class ProfileError(Exception):
    """Base for failures the HTTP layer knows how to report."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(ProfileError):
    status_code = 401
    default_message = "Unauthorized"


class InvalidInput(ProfileError):
    status_code = 400
    default_message = "Invalid input"


class NotFound(ProfileError):
    status_code = 404
    default_message = "User not found"


class InternalError(ProfileError):
    status_code = 500

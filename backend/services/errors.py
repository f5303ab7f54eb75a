class AppError(Exception):
    """Error with a user-facing message and the HTTP status it maps to"""
    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    status_code = 400


class AuthenticationError(AppError):
    status_code = 401


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class QuotaExceededError(AppError):
    status_code = 403


class UpstreamServiceError(AppError):
    status_code = 502


class OAuthError(Exception):
    """OAuth flow failure; the callback turns it into a login redirect"""
    error_code = "oauth_failed"


class MissingEmailError(OAuthError):
    error_code = "email_required"

"""Domain errors surfaced to API callers as ``{"error": message}``"""


class CaseMailError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class SettingsNotFoundError(CaseMailError):
    status_code = 404


class RelayError(CaseMailError):
    """SMTP connection, authentication or send failure"""

    status_code = 500

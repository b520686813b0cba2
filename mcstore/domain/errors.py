# mcstore/domain/errors.py


class StoreError(Exception):
    """Blad widoczny dla uzytkownika, message nadaje sie do pokazania w UI."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RemoteError(StoreError):
    """Zdalny serwis odpowiedzial statusem spoza 2xx (status 0 = brak polaczenia)."""

    def __init__(self, status_code: int, body: str):
        super().__init__(body or f"Remote service error {status_code}")
        self.status_code = status_code
        self.body = body


class ValidationError(StoreError):
    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class NotFoundError(StoreError):
    pass


class ConflictError(StoreError):
    pass

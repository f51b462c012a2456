from fastapi import HTTPException


class ValidationError(HTTPException):
    """Bad input from the client: body, title, completed flag or id."""

    def __init__(self, message: str):
        super().__init__(status_code=400, detail=message)


class NotFoundError(HTTPException):
    def __init__(self, message: str):
        super().__init__(status_code=404, detail=message)


class StorageError(Exception):
    """The backing file could not be read, parsed or written."""

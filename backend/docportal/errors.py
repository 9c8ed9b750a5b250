"""Exception types shared by services and routers."""


class DocportalError(Exception):
    """Base class for all Docportal errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StorageError(DocportalError):
    """A query or connection to the database failed."""

    status_code = 500


class ValidationError(DocportalError):
    """Malformed slug, missing required field or invalid reference."""

    status_code = 400


class NotFoundError(DocportalError):
    """A referenced id does not exist."""

    status_code = 404


class InvalidInputError(DocportalError):
    """Malformed input handed to a pure core function."""

    status_code = 400

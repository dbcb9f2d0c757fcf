# app/clinical_store/exceptions.py
"""
Clinical Store errors.

Each error carries the HTTP status the API layer answers with.
"""


class ClinicError(Exception):
    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PermissionDeniedError(ClinicError):
    """The acting principal may not perform this operation."""
    status_code = 403


class InvalidTransitionError(ClinicError):
    """The appointment's current status does not allow the requested action."""
    status_code = 409


class ReferenceNotFoundError(ClinicError):
    """A referenced patient, doctor or medicine does not exist."""
    status_code = 404


class PrescriptionValidationError(ClinicError):
    status_code = 422

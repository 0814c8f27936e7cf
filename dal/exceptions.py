'''
Exceptions raised by the data access layer.
Each carries the HTTP status the service layer should answer with.
'''


class DisasterServiceException(Exception):
    status_code = 500

    def __init__(self, message):
        super(DisasterServiceException, self).__init__(message)
        self.message = message


class StoreError(DisasterServiceException):
    """
    The record or cache store was unreachable or rejected the operation.
    """
    status_code = 500


class NotFound(DisasterServiceException):
    status_code = 404


class ValidationError(DisasterServiceException):
    """
    Required input is missing or malformed; raised before any external call.
    """
    status_code = 400


class ConflictError(DisasterServiceException):
    """
    Another writer appended to the audit trail between our read and our write.
    """
    status_code = 409


class AdapterError(DisasterServiceException):
    """
    An external source did not produce a usable result.
    stage names the step that failed so callers can explain it.
    """
    status_code = 502
    stage = "fetch"

    def __init__(self, message, stage=None):
        super(AdapterError, self).__init__(message)
        if stage:
            self.stage = stage


class ExtractionFailed(AdapterError):
    stage = "extraction"


class NoLocationFound(AdapterError):
    stage = "geocoding"


class FetchFailed(AdapterError):
    pass

"""
Domain error taxonomy shared by the engine, the store and the API layer
"""


class RepairError(Exception):
    """Base class for all repair-desk domain errors"""

    code = "REPAIR_ERROR"

    def __init__(self, message: str, hint: str = None):
        super().__init__(message)
        self.message = message
        self.hint = hint


class CaseValidationError(RepairError):
    """Missing required field, empty work items or invalid estimator input"""

    code = "VALIDATION_ERROR"


class CaseNotFoundError(RepairError):
    """Case id does not exist in the store"""

    code = "CASE_NOT_FOUND"


class StoreNotFoundError(RepairError):
    """Backing file is absent on a read path that requires it"""

    code = "DATABASE_NOT_FOUND"


class StoreCorruptedError(RepairError):
    """Persisted collection could not be parsed"""

    code = "STORE_CORRUPTED"

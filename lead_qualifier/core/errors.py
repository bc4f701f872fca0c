"""Exception types raised inside the qualification service."""


class QualifierError(Exception):
    """Base class for lead qualifier errors."""


class ExtractionError(QualifierError):
    """The LLM provider call failed or returned nothing usable."""


class CallNotEndedError(QualifierError):
    """A call was asked to be qualified before it finished."""

    def __init__(self, call_id: str, status: str):
        self.call_id = call_id
        self.status = status
        super().__init__(f"Call {call_id} is still in progress (status: {status})")

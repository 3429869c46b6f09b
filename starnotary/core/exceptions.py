"""
starnotary Exception Hierarchy

All exceptions inherit from StarNotaryError for easy catching.
"""


class StarNotaryError(Exception):
    """Base exception for all starnotary errors"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ValidationError(StarNotaryError):
    """Raised when input data validation fails"""
    pass


class ChallengeFormatError(ValidationError):
    """Raised when an ownership challenge message cannot be parsed"""
    pass


class CandidateRejectedError(ValidationError):
    """
    Raised when a sealed candidate does not extend the current tail.

    Nothing is appended. Distinct from ChainIntegrityError, whose block
    is already in the chain.
    """
    pass


class OwnershipError(StarNotaryError):
    """Raised when proof of wallet ownership fails"""
    pass


class ChallengeExpiredError(OwnershipError):
    """Raised when the challenge message is outside the freshness window"""
    pass


class SignatureInvalidError(OwnershipError):
    """Raised when the signature does not match the address and message"""
    pass


class ChainIntegrityError(StarNotaryError):
    """
    Raised when chain validation fails after an append.

    The appended block is NOT rolled back. ``block`` is the block that was
    appended and ``report`` the ValidationReport that flagged the chain.
    """

    def __init__(self, message: str, details: dict = None, report=None, block=None):
        super().__init__(message, details)
        self.report = report
        self.block = block


class DecodeError(StarNotaryError):
    """Raised when a block body cannot be decoded"""
    pass

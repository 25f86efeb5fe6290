class DistributorError(Exception):
    """Base class for every reason a distributor operation is rejected."""
    kind = "DistributorError"

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind)
        self.message = message or self.kind

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message}


class WrongFeeRate(DistributorError):
    kind = "WrongFeeRate"


class PriceOutOfRange(DistributorError):
    kind = "PriceOutOfRange"


class SaleNotAuthorized(DistributorError):
    kind = "SaleNotAuthorized"


class PaymentTooLow(DistributorError):
    kind = "PaymentTooLow"


class InsufficientRemainingSupply(DistributorError):
    kind = "InsufficientRemainingSupply"


class RefundTransferFailed(DistributorError):
    kind = "RefundTransferFailed"


class TokenTransferFailed(DistributorError):
    kind = "TokenTransferFailed"


class CreatorWithdrawalFailed(DistributorError):
    kind = "CreatorWithdrawalFailed"


class OwnerWithdrawalFailed(DistributorError):
    kind = "OwnerWithdrawalFailed"


class Reentrant(DistributorError):
    kind = "Reentrant"


class CallerNotPrivileged(DistributorError):
    kind = "CallerNotPrivileged"


class ArithmeticBoundsExceeded(DistributorError, ValueError):
    """A pricing input or intermediate left the documented safe operating range."""
    kind = "ArithmeticBoundsExceeded"


class InvalidListing(DistributorError, ValueError):
    kind = "InvalidListing"

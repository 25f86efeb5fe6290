from enum import Enum


class SaleEvent(Enum):
    SALE_LISTED = "SALE_LISTED"
    SALE_COMPLETED = "SALE_COMPLETED"
    REFUND_ISSUED = "REFUND_ISSUED"
    CREATOR_WITHDREW = "CREATOR_WITHDREW"
    OWNER_WITHDREW = "OWNER_WITHDREW"
    FEE_CHANGED = "FEE_CHANGED"

    @classmethod
    def from_str(cls, event_str: str) -> "SaleEvent":
        """
        Convert a string to a SaleEvent enum.
        :param event_str: str
        :return: SaleEvent or NotImplementedError
        """
        for member in cls:
            if event_str.upper() == member.name:
                return member
        raise NotImplementedError(f"No sale event enum for {event_str}")

    def __hash__(self):
        return hash(self.value)

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.__str__()


class PurchaseOutcome(Enum):
    FILLED = "FILLED"
    PARTIALLY_FILLED = "PARTIALLY_FILLED"

    @classmethod
    def from_str(cls, outcome_str):
        if outcome_str.upper() == PurchaseOutcome.FILLED.name:
            return PurchaseOutcome.FILLED
        elif outcome_str.upper() == PurchaseOutcome.PARTIALLY_FILLED.name:
            return PurchaseOutcome.PARTIALLY_FILLED
        else:
            raise NotImplementedError(f"No purchase outcome enum for {outcome_str}")

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.__str__()

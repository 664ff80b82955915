"""Error types for channel pricing.

Decode and validation errors are raised for caller-submitted documents and
are always recovered at the edit boundary. Not-found and store-write errors
abort the requested operation with no partial effect.
"""

from typing import Optional


class PricingError(Exception):
    """Base class for all channel pricing errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DecodeError(PricingError):
    """Raised when a submitted or stored document is not valid JSON."""

    pass


class ValidationError(PricingError):
    """Raised when a pricing document breaks a structural or numeric rule.

    Examples:
        >>> try:
        ...     parse_model_configs('{"gpt-4": {"ratio": -1}}')
        ... except ValidationError as e:
        ...     print(e.model_name, e.field)
        gpt-4 ratio
    """

    def __init__(
        self,
        message: str,
        model_name: Optional[str] = None,
        field: Optional[str] = None,
    ) -> None:
        """Initialize validation error.

        Args:
            message: Error message
            model_name: Model whose entry failed validation, if any
            field: Field within the entry that failed, if any
        """
        super().__init__(message)
        self.model_name = model_name
        self.field = field


class NotFoundError(PricingError):
    """Raised when a channel id is unknown to the pricing store."""

    def __init__(self, channel_id: int) -> None:
        super().__init__(f"Channel {channel_id} not found")
        self.channel_id = channel_id


class StoreWriteError(PricingError):
    """Raised when persisting channel pricing fails.

    ``conflict`` is set when the row changed underneath the write
    (concurrent update or lock contention).
    """

    def __init__(self, channel_id: int, message: str, conflict: bool = False) -> None:
        super().__init__(message)
        self.channel_id = channel_id
        self.conflict = conflict

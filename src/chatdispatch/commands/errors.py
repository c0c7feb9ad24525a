from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when a handler, resolver, gate or template is registered wrongly."""

    pass


class ConversionFailure(Exception):
    """
    Raised by a parameter resolver when a token cannot be converted.

    ``message_id`` optionally names the template reported to the channel in
    place of the generic wrong-usage message.
    """

    def __init__(self, reason: str = "", *, message_id: str | None = None) -> None:
        super().__init__(reason)
        self.message_id = message_id


class WrongUsage(Exception):
    """Raised while binding when the tokens do not fit the declared parameters."""

    pass

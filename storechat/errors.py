class StoreChatError(Exception):
    """Base class for errors raised by storechat."""


class CatalogError(StoreChatError):
    """The product catalog could not be loaded."""


class TokenError(StoreChatError):
    """A bearer token was missing, malformed, forged or expired."""

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message

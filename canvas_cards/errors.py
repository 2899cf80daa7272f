class CardError(Exception):
    """Base class for errors raised while rendering a card."""


class FetchError(CardError):
    """A remote image could not be retrieved."""

    def __init__(self, message: str, url: str, status: int | None = None):
        super().__init__(message)
        self.url = url
        self.status = status


class LoadError(CardError):
    """An image reference could not be decoded into a bitmap."""

    def __init__(self, message: str, reference: str):
        super().__init__(message)
        self.reference = reference

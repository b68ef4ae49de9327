class ValuationError(ValueError):
    """Raised when calculator or badge input cannot produce a valuation."""


class RenderError(Exception):
    """Raised when an image cannot be rendered from the given parameters."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code

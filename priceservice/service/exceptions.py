"""Domain errors raised by the service layer."""


class PriceNotFoundError(Exception):
    """No article or no prices exist for the requested store/article/page."""

    default_detail = "No prices were found for a given request"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

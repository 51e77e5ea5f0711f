"""
Domain exceptions raised by the stock query pipeline.
"""

NO_BROKER_DATA_MESSAGE = (
    "Data broker tidak tersedia untuk periode ini "
    "(Market belum buka atau saham tidak aktif)"
)

INVALID_ORDERBOOK_MESSAGE = "Invalid Orderbook API response structure"


class NoBrokerDataError(Exception):
    """No live broker activity and no persisted history for the emiten"""

    def __init__(self, emiten: str):
        super().__init__(NO_BROKER_DATA_MESSAGE)
        self.emiten = emiten


class OrderbookStructureError(ValueError):
    """Orderbook payload is missing fields the upstream contract guarantees"""

    def __init__(self, message: str = INVALID_ORDERBOOK_MESSAGE):
        super().__init__(message)


class UpstreamRequestError(RuntimeError):
    """A Stockbit endpoint answered with a non-success status or bad body"""

    def __init__(self, endpoint: str, status_code: int | None, detail: str = ""):
        message = f"Stockbit {endpoint} request failed"
        if status_code is not None:
            message += f" ({status_code})"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.endpoint = endpoint
        self.status_code = status_code

class SerpApiError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class AmadeusError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class AmadeusNotConfiguredError(Exception):
    def __init__(self):
        super().__init__(
            "Amadeus API credentials not configured. "
            "Set AMADEUS_API_KEY and AMADEUS_API_SECRET."
        )


class RateLimitError(Exception):
    def __init__(self, service: str):
        self.service = service
        super().__init__(f"Rate limit exceeded for {service}")

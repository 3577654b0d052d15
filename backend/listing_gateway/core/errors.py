class ListingGatewayError(Exception):
    """Base class for failures raised by the listing gateway."""


class UpstreamUnavailable(ListingGatewayError):
    """Transport failure while talking to an upstream provider."""

    def __init__(self, what: str, reason: str = "") -> None:
        self.what = what
        self.reason = reason
        message = f"Failed to fetch {what}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MalformedUpstreamPayload(ListingGatewayError):
    """A response arrived but its body could not be decoded."""

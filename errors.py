# Filename: errors.py


class ConfigError(Exception):
    """Raised at start-up when a required setting is missing."""


class UpstreamError(Exception):
    """An external API answered with an error we do not retry."""

    def __init__(self, message: str, status: int = None):
        super().__init__(message)
        self.status = status


class UpstreamRateLimited(UpstreamError):
    """HTTP 429 from an external API; retried with backoff."""

    def __init__(self, url: str):
        super().__init__(f"Rate limited by {url}", status=429)

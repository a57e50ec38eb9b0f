"""Exception hierarchy for the Solr status exporter."""

from typing import Optional


class SolrStatusError(Exception):
    """Base class for all exporter errors."""


class StartupConfigError(SolrStatusError):
    """Configuration is unusable; the process cannot start."""


class PollError(SolrStatusError):
    """A single poll failed. Recoverable: the next tick retries."""


class FetchError(PollError):
    """HTTP layer failure."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class TransportError(FetchError):
    """Connection could not be established or timed out."""


class UnexpectedStatusError(FetchError):
    """Server answered with a status code other than 200."""

    def __init__(self, status_code: int, url: Optional[str] = None):
        super().__init__(
            f"server did not reply as expected: got status code {status_code}, expected 200",
            url=url
        )
        self.status_code = status_code


class ReadError(FetchError):
    """Response body could not be fully read."""


class ParseError(PollError):
    """Response body is not valid JSON."""


class CoreNotFoundError(PollError):
    """The requested core is not served by the Solr instance."""

    def __init__(self, core: str):
        super().__init__(f"no data could be found for the index '{core}'")
        self.core = core

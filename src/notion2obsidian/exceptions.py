"""Custom exceptions for notion2obsidian."""


class Notion2ObsidianError(Exception):
    """Base exception for all notion2obsidian errors."""


class ConfigurationError(Notion2ObsidianError):
    """Configuration or environment variable error."""


class TransportError(Notion2ObsidianError):
    """Network or authentication failure while talking to Notion."""


class NotionAPIError(TransportError):
    """Error response from the Notion API."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(f"Notion API error ({status_code}): {message}")


class RateLimitError(NotionAPIError):
    """Rate limit exceeded error."""

    def __init__(self, retry_after: int | None = None):
        self.retry_after = retry_after
        message = f"Rate limited (retry after {retry_after}s)" if retry_after else "Rate limited"
        super().__init__(429, message)


class ConversionError(Notion2ObsidianError):
    """Error converting a single page into a note."""

    def __init__(self, record_id: str, name: str, original_error: Exception):
        self.record_id = record_id
        self.name = name
        self.original_error = original_error
        super().__init__(f"Failed to convert '{name}' ({record_id}): {original_error}")


class SchemaEmissionError(Notion2ObsidianError):
    """Error writing the .base view file."""

    def __init__(self, name: str, original_error: Exception):
        self.name = name
        self.original_error = original_error
        super().__init__(f"Failed to create base file '{name}': {original_error}")


class ImportFailedError(Notion2ObsidianError):
    """Terminal failure of an import run."""

    def __init__(self, database: str, original_error: Exception):
        self.database = database
        self.original_error = original_error
        super().__init__(f"Import of '{database}' failed: {original_error}")

class ManifestError(Exception):
    """Base class for every error raised by abrscope."""


class EmptyContentError(ManifestError):
    """Raised when manifest content is empty or whitespace only."""

    def __init__(self, message="Manifest content is empty"):
        super().__init__(message)


class UnsupportedFormatError(ManifestError):
    """Raised when a detected format has no parser."""

    def __init__(self, manifest_format=None):
        self.manifest_format = manifest_format
        super().__init__(f"Unsupported manifest format: {manifest_format}")


class ManifestParseError(ManifestError):
    """Raised when the manifest cannot be read at all (e.g. broken MPD XML)."""


class InvalidBaseUrlError(ManifestError):
    """Raised for a base URL that is not an absolute URL."""

    def __init__(self, base_url=None):
        self.base_url = base_url
        super().__init__(f"Invalid base URL: {base_url!r}")


class FetchError(ManifestError):
    """Raised when a manifest could not be downloaded."""

    def __init__(self, message=None, status_code=None, url=None):
        self.status_code = status_code
        self.url = url
        super().__init__(message or f"HTTP Error {status_code}")

    def __repr__(self):
        return f"FetchError(status_code={self.status_code}, url={self.url}, message={self.args[0]})"

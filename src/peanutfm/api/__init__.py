"""HTTP client for the file server API."""

from peanutfm.api.client import FileAPIClient, create_http_client, files_url

__all__ = ["FileAPIClient", "create_http_client", "files_url"]

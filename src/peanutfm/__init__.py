"""peanutfm — terminal client and file-operation state machine for Peanut-NAS.

Created: 2026-10-19

Usage:
    from peanutfm.api.client import FileAPIClient, create_http_client
    from peanutfm.files.manager import FileManager

    async with create_http_client() as http:
        manager = FileManager(FileAPIClient(http))
        await manager.refresh()
        for entry in manager.entries:
            print(entry.name, entry.size_label)
"""

__version__ = "0.3.0"

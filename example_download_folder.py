"""
Example: Browse Google Drive and download a folder

This example lists the first page of your Drive root, then downloads a
folder (including all nested folders) into ./downloads.

The fetcher does not perform the OAuth flow. Obtain an access token with the
drive.readonly scope from your own auth flow (or the OAuth 2.0 Playground)
and export it before running:

Usage:
    export DRIVE_ACCESS_TOKEN="ya29...."
    python example_download_folder.py [folder_id]
"""

import asyncio
import logging
import os
import sys

from drive_fetcher import DriveApiService, FileSystemSink, AuthError, DriveFetcherError
from drive_fetcher import config


async def main(folder_id=None):
    print("=" * 60)
    print("Drive Folder Download Example")
    print("=" * 60)
    print()

    token = os.getenv("DRIVE_ACCESS_TOKEN")
    if not token:
        print("ERROR: DRIVE_ACCESS_TOKEN is not set!")
        print("Export a Drive access token before running this example.")
        return 1

    service = DriveApiService()

    try:
        page = await service.list_page(token)
        print(f"First {len(page.entries)} entries in My Drive:")
        for entry in page.entries:
            print(f"  - {entry} [{entry.entry_id}]")
        if page.has_more:
            print("  ... more entries available")
        print()

        if folder_id is None:
            folders = [entry for entry in page.entries if entry.is_folder]
            if not folders:
                print("No folder on the first page; pass a folder id as argument.")
                return 0
            folder_id = folders[0].entry_id

        sink = FileSystemSink(config.DOWNLOAD_DIR)
        result = await service.download_folder(
            token,
            folder_id,
            sink,
            on_progress=lambda item: print(f"  {'✓' if hasattr(item, 'content') else '✗'} {item.entry.name}")
        )

        print()
        print(f"✓ {result}")
        for failure in result.failures:
            print(f"✗ {failure.entry.name}: {failure.error}")

    except AuthError as e:
        print(f"✗ Token rejected, obtain a fresh one: {e}")
        return 1
    except DriveFetcherError as e:
        print(f"✗ Error: {e}")
        return 1

    return 0


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    sys.exit(asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else None)))

"""Add a shared access code to the access_codes collection.

Usage:
    python add_access_code.py CODE
"""

import asyncio
import sys

from config import COLLECTIONS
from database.appwrite import AccessCodeService, DocumentStoreError
from database.connection import DatabaseManager
from logging_config import get_logger, setup_logging
from workflow.debug import print_json_debug

logger = get_logger(__name__)


async def add_access_code(code: str, manager: DatabaseManager) -> dict:
    service = AccessCodeService(
        manager.get_document_store(),
        manager.database_id,
        COLLECTIONS["access_codes"],
    )
    if await service.verify_access_code(code):
        logger.info("Access code already exists, nothing to do")
        return {}
    document = await service.add_access_code(code)
    print_json_debug(document, label="ACCESS CODE CREATED")
    return document


async def _main(code: str) -> int:
    manager = DatabaseManager()
    try:
        document = await add_access_code(code, manager)
    except DocumentStoreError as e:
        logger.error(f"Error adding access code: {e}")
        return 1
    finally:
        await manager.close_all()
    if document:
        print(f"✅ Access code added ({document.get('$id', '?')})")
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 2 or not sys.argv[1].strip():
        print("Usage: python add_access_code.py CODE")
        sys.exit(2)
    setup_logging()
    sys.exit(asyncio.run(_main(sys.argv[1])))

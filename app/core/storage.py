"""
Temporary storage for uploaded files.

Uploads are staged on the local filesystem only for the duration of a single
request: the file is written, parsed, and removed again whether processing
succeeded or not.
"""

import logging
import os
import shutil
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, BinaryIO
from fastapi.concurrency import run_in_threadpool
from app.core.config import settings

logger = logging.getLogger(__name__)


class LocalStorage:
    """Local filesystem staging area for uploads"""

    def __init__(self, base_dir: str = "uploads"):
        self.base_dir = base_dir

    def save_file(self, file: BinaryIO, filename: str) -> str:
        """Write the stream to a uniquely named file and return its path"""
        os.makedirs(self.base_dir, exist_ok=True)
        # Only keep the basename so a crafted filename cannot escape base_dir
        safe_name = os.path.basename(filename or "upload")
        file_path = os.path.join(self.base_dir, f"{uuid.uuid4()}_{safe_name}")

        try:
            with open(file_path, "wb") as buffer:
                shutil.copyfileobj(file, buffer)
        except Exception:
            # Never leave a partially written upload behind
            self.delete_file(file_path)
            raise

        return file_path

    def delete_file(self, file_path: str) -> bool:
        """Delete a staged file, returning False if it was already gone"""
        try:
            if os.path.exists(file_path):
                os.remove(file_path)
                return True
            return False
        except OSError as e:
            logger.error(f"Error deleting file {file_path}: {e}")
            return False

    def file_exists(self, file_path: str) -> bool:
        return os.path.exists(file_path)

    @asynccontextmanager
    async def staged(self, file: BinaryIO, filename: str) -> AsyncIterator[str]:
        """
        Stage an upload for the lifetime of the with-block.

        The staged file is removed on every exit path, including exceptions.
        Disk writes run in the threadpool so the event loop is not blocked.
        """
        file_path = await run_in_threadpool(self.save_file, file, filename)
        logger.debug(f"Staged upload {filename} at {file_path}")
        try:
            yield file_path
        finally:
            if await run_in_threadpool(self.delete_file, file_path):
                logger.debug(f"Removed staged upload {file_path}")


# Singleton instance
storage = LocalStorage(settings.UPLOAD_DIR)

import io
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from gridfs.errors import NoFile

from jobportal.database import get_fs_bucket
from jobportal.utils.upload import AcceptedResume, generate_resume_filename

logger = logging.getLogger(__name__)


@dataclass
class StoredResume:
    filename: str
    content_type: str
    data: bytes = field(repr=False)


class ResumeStorage:
    """Resume binaries in the ``resumes`` GridFS bucket, keyed by generated filename."""

    def __init__(self, bucket):
        self.bucket = bucket

    async def save(self, resume: AcceptedResume, owner_id: str) -> str:
        filename = generate_resume_filename(resume.filename)
        await self.bucket.upload_from_stream(
            filename,
            io.BytesIO(resume.data),
            metadata={
                "owner_id": owner_id,
                "content_type": resume.content_type,
                "original_filename": resume.filename,
                "uploaded_at": datetime.utcnow(),
            },
        )
        logger.info("Stored resume %s (%d bytes)", filename, resume.size)
        return filename

    async def open(self, filename: str) -> Optional[StoredResume]:
        try:
            grid_out = await self.bucket.open_download_stream_by_name(filename)
        except NoFile:
            return None
        contents = await grid_out.read()
        metadata = grid_out.metadata or {}
        return StoredResume(
            filename=filename,
            content_type=metadata.get("content_type", "application/octet-stream"),
            data=contents,
        )

    async def delete(self, filename: str) -> int:
        deleted = 0
        async for grid_out in self.bucket.find({"filename": filename}):
            await self.bucket.delete(grid_out._id)
            deleted += 1
        if deleted:
            logger.info("Deleted resume %s", filename)
        return deleted


def get_resume_storage() -> ResumeStorage:
    return ResumeStorage(get_fs_bucket())

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorGridFSBucket
from pymongo import ASCENDING, DESCENDING

from jobportal.config import MONGO_URI, DATABASE_NAME

logger = logging.getLogger(__name__)

client = None
db = None
fs_bucket = None


async def connect_to_mongo():
    global client, db, fs_bucket

    if not MONGO_URI:
        raise ValueError("MONGO_URI environment variable is not set! Check your .env file.")

    client = AsyncIOMotorClient(MONGO_URI)
    db = client[DATABASE_NAME]
    fs_bucket = AsyncIOMotorGridFSBucket(db, bucket_name="resumes")
    await client.admin.command("ping")
    await ensure_indexes(db)

    if "mongodb+srv" in MONGO_URI:
        logger.info("Connected to MongoDB Atlas, database %s", DATABASE_NAME)
    else:
        logger.warning("Connected to LOCAL MongoDB, database %s", DATABASE_NAME)


async def ensure_indexes(database):
    await database.users.create_index("email", unique=True)
    await database.jobs.create_index([("created_by", ASCENDING), ("created_at", DESCENDING)])
    await database.applications.create_index(
        [("applicant_id", ASCENDING), ("job_id", ASCENDING)], unique=True
    )
    await database.applications.create_index([("recruiter_id", ASCENDING), ("created_at", DESCENDING)])


async def close_mongo_connection():
    if client:
        client.close()
        logger.info("MongoDB connection closed")


def get_fs_bucket():
    return fs_bucket


def get_db():
    return db

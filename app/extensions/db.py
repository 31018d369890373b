import os

from dotenv import load_dotenv
from pymongo import ASCENDING, MongoClient
from redis import Redis

load_dotenv()


class MongoDB:
    def __init__(self):
        self.client = None
        self.db = None

    def init_app(self, app):
        uri = app.config.get("MONGO_URI") or os.getenv("MONGO_URI", "mongodb://localhost:27017")
        db_name = app.config.get("DB_NAME") or os.getenv("DB_NAME", "social_publisher")

        # connect=False: the first query opens the connection, not app creation
        self.client = MongoClient(uri, connect=False, tz_aware=True)
        self.db = self.client[db_name]
        app.mongo = self.db

    def create_indexes(self):
        # posts swept by the due-post scheduler
        self.db.posts.create_index([("status", ASCENDING), ("scheduled_for", ASCENDING)])
        self.db.post_media.create_index([("post_id", ASCENDING), ("position", ASCENDING)])
        self.db.social_accounts.create_index([("platform", ASCENDING), ("platform_account_id", ASCENDING)])

    def get_collection(self, name):
        if self.db is None:
            raise RuntimeError("MongoDB not initialized")
        return self.db[name]


class RedisConnection:
    def __init__(self):
        self.connection = None

    def init_app(self, app):
        host = app.config.get("REDIS_HOST") or os.getenv("REDIS_HOST", "localhost")
        port = int(app.config.get("REDIS_PORT") or os.getenv("REDIS_PORT", 6379))
        self.connection = Redis(host=host, port=port)
        app.redis = self.connection

    def get_connection(self):
        if self.connection is None:
            self.connection = Redis(
                host=os.getenv("REDIS_HOST", "localhost"),
                port=int(os.getenv("REDIS_PORT", 6379)),
            )
        return self.connection


# Export the instances
db = MongoDB()
redis_connection = RedisConnection()

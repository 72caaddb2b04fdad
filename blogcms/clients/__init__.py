from blogcms.clients.mongo_client import MongoClient

__all__ = ["MongoClient"]

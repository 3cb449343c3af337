import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from blogapi.models.ids import to_object_id

logger = logging.getLogger('blogapi.repositories.users')


class UserRepository:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.collection = db['users']

    async def ensure_indexes(self) -> None:
        await self.collection.create_index([('email', ASCENDING)], unique=True)

    async def find_by_id(self, user_id) -> dict | None:
        object_id = to_object_id(user_id)
        if object_id is None:
            return None
        return await self.collection.find_one({'_id': object_id})

    async def find_by_email(self, email: str) -> dict | None:
        return await self.collection.find_one({'email': email})

    async def save(self, user: dict) -> dict:
        if '_id' not in user:
            result = await self.collection.insert_one(user)
            user['_id'] = result.inserted_id
            logger.info(f'Inserted user {user["_id"]}')
        else:
            await self.collection.replace_one({'_id': user['_id']}, user)
        return user

    async def pull_post(self, user_id, post_id) -> None:
        await self.collection.update_one(
            {'_id': to_object_id(user_id)},
            {'$pull': {'posts': to_object_id(post_id)}},
        )

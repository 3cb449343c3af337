import logging
from datetime import datetime, timezone

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING

from blogapi.models.ids import to_object_id

logger = logging.getLogger('blogapi.repositories.posts')


class PostRepository:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.collection = db['posts']
        self.users = db['users']

    async def count(self) -> int:
        return await self.collection.count_documents({})

    async def find_by_id(self, post_id, populate: bool = False) -> dict | None:
        object_id = to_object_id(post_id)
        if object_id is None:
            return None
        post = await self.collection.find_one({'_id': object_id})
        if post is not None and populate:
            await self._populate_creators([post])
        return post

    async def find_by_ids(self, post_ids) -> list[dict]:
        object_ids = [oid for oid in map(to_object_id, post_ids) if oid is not None]
        if not object_ids:
            return []
        return await self.collection.find({'_id': {'$in': object_ids}}).to_list(length=None)

    async def find_page(self, skip: int, limit: int) -> list[dict]:
        """Newest posts first, with ``creator`` expanded to the user record."""
        cursor = self.collection.find({}, sort=[('createdAt', DESCENDING)], skip=skip, limit=limit)
        posts = await cursor.to_list(length=None)
        await self._populate_creators(posts)
        return posts

    async def save(self, post: dict) -> dict:
        now = datetime.now(timezone.utc)
        creator = post.get('creator')
        if isinstance(creator, dict):
            post['creator'] = creator['_id']

        if '_id' not in post:
            post['createdAt'] = now
            post['updatedAt'] = now
            result = await self.collection.insert_one(post)
            post['_id'] = result.inserted_id
            logger.info(f'Inserted post {post["_id"]}')
        else:
            post['updatedAt'] = now
            await self.collection.replace_one({'_id': post['_id']}, post)

        if isinstance(creator, dict):
            post['creator'] = creator
        return post

    async def delete(self, post_id) -> bool:
        result = await self.collection.delete_one({'_id': to_object_id(post_id)})
        return result.deleted_count == 1

    async def _populate_creators(self, posts: list[dict]) -> None:
        creator_ids = {post['creator'] for post in posts if not isinstance(post['creator'], dict)}
        if not creator_ids:
            return
        users = await self.users.find({'_id': {'$in': list(creator_ids)}}).to_list(length=None)
        by_id = {user['_id']: user for user in users}
        for post in posts:
            creator = by_id.get(post['creator'])
            if creator is not None:
                post['creator'] = creator
            else:
                logger.warning(f'Post {post["_id"]} references missing user {post["creator"]}')

"""Resolvers for every GraphQL operation.

Each resolver checks its own authorization before touching data. The
request identity, settings, repositories and image storage travel in
``info.context`` (see ``blogapi.gql.app.get_context_value``).
"""
import logging
from datetime import timedelta

from pymongo.errors import DuplicateKeyError

from blogapi.auth import require_authenticated
from blogapi.errors import Conflict, InvalidInput, NotAuthenticated, NotAuthorized, NotFound
from blogapi.models.post import new_post, serialize_post
from blogapi.models.user import new_user, serialize_user
from blogapi.schemas.post import PostInput, PostPage
from blogapi.schemas.user import AuthData, UserInput
from blogapi.utils.security import create_access_token, hash_password, verify_password
from blogapi.utils.validation import raise_for_errors, validate_post_input, validate_user_input

logger = logging.getLogger('blogapi.resolvers')


# ==========================
# Queries
# ==========================

async def sign_in(_, info, email, password):
    ctx = info.context
    settings = ctx['settings']

    user = await ctx['users'].find_by_email(email)
    if not user:
        raise NotFound('Email not found!')
    if not verify_password(password, user['password']):
        raise NotAuthenticated('The password is incorrect!')

    user_id = str(user['_id'])
    token = create_access_token(
        {'email': user['email'], 'userId': user_id},
        settings.SECRET_KEY,
        settings.JWT_ALGORITHM,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    logger.info(f'User {user_id} signed in')
    return AuthData(token=token, userId=user_id).model_dump()


async def get_posts(_, info, page=None):
    ctx = info.context
    require_authenticated(ctx['identity'])

    per_page = ctx['settings'].POSTS_PER_PAGE
    page = max(page or 1, 1)
    total_posts = await ctx['posts'].count()
    posts = await ctx['posts'].find_page(skip=(page - 1) * per_page, limit=per_page)
    return PostPage(posts=[serialize_post(p) for p in posts], totalPosts=total_posts).model_dump()


async def get_post_by_id(_, info, id):
    ctx = info.context
    require_authenticated(ctx['identity'])

    post = await ctx['posts'].find_by_id(id, populate=True)
    if not post:
        raise NotFound('Post not found!')
    return serialize_post(post)


async def get_user(_, info):
    ctx = info.context
    identity = require_authenticated(ctx['identity'])

    user = await ctx['users'].find_by_id(identity.user_id)
    if not user:
        raise NotFound('User not found!')
    return serialize_user(user)


# ==========================
# Mutations
# ==========================

async def create_user(_, info, userInput=None):
    ctx = info.context
    data = UserInput(**_required(userInput))

    raise_for_errors(validate_user_input(data.email, data.password))

    if await ctx['users'].find_by_email(data.email):
        raise Conflict('Email already exists!')

    password_hash = hash_password(data.password, ctx['settings'].PASSWORD_HASH_ROUNDS)
    try:
        user = await ctx['users'].save(new_user(data.name, data.email, password_hash))
    except DuplicateKeyError:
        # concurrent registration with the same email, stopped by the unique index
        raise Conflict('Email already exists!')
    logger.info(f'Registered user {user["_id"]}')
    return serialize_user(user)


async def create_post(_, info, postInput=None):
    ctx = info.context
    identity = require_authenticated(ctx['identity'])
    data = PostInput(**_required(postInput))

    raise_for_errors(validate_post_input(data.title, data.content))

    users, posts = ctx['users'], ctx['posts']
    user = await users.find_by_id(identity.user_id)
    if not user:
        raise NotAuthenticated('Invalid user!')

    post = await posts.save(new_post(data.title, data.imageUrl, data.content, user['_id']))
    user.setdefault('posts', []).append(post['_id'])
    try:
        await users.save(user)
    except Exception:
        logger.error(f'Failed to link post {post["_id"]} to user {user["_id"]}, removing it')
        await posts.delete(post['_id'])
        raise

    post['creator'] = user
    logger.info(f'User {user["_id"]} created post {post["_id"]}')
    return serialize_post(post)


async def update_post(_, info, id, postInput=None):
    ctx = info.context
    identity = require_authenticated(ctx['identity'])

    post = await ctx['posts'].find_by_id(id, populate=True)
    if not post:
        raise NotFound('Post not found!')
    if identity.user_id != str(_creator_id(post)):
        raise NotAuthorized('Not authorizated!')

    data = PostInput(**_required(postInput))
    raise_for_errors(validate_post_input(data.title, data.content))

    post['title'] = data.title
    if data.has_new_image():
        post['imageUrl'] = data.imageUrl
    post['content'] = data.content

    post = await ctx['posts'].save(post)
    logger.info(f'Post {post["_id"]} updated')
    return serialize_post(post)


async def delete_post(_, info, id):
    ctx = info.context
    identity = require_authenticated(ctx['identity'], 'Not authorizated!')
    users, posts = ctx['users'], ctx['posts']

    post = await posts.find_by_id(id)
    if not post:
        raise NotFound('Post not found!')
    if identity.user_id != str(_creator_id(post)):
        raise NotAuthorized('Not authorizated!')

    user = await users.find_by_id(identity.user_id)
    if not user:
        raise NotFound('User not found!')

    await posts.delete(post['_id'])
    ctx['images'].clear(post.get('imageUrl'))
    await users.pull_post(user['_id'], post['_id'])
    logger.info(f'Post {post["_id"]} deleted')
    return True


async def update_status(_, info, status):
    ctx = info.context
    identity = require_authenticated(ctx['identity'])

    user = await ctx['users'].find_by_id(identity.user_id)
    if not user:
        raise NotFound('User not found!')
    user['status'] = status
    user = await ctx['users'].save(user)
    return serialize_user(user)


# ==========================
# Nested fields
# ==========================

async def resolve_user_posts(user, info):
    posts = await info.context['posts'].find_by_ids(user['posts'])
    by_id = {str(p['_id']): p for p in posts}
    return [serialize_post(by_id[post_id]) for post_id in user['posts'] if post_id in by_id]


async def resolve_post_creator(post, info):
    creator = post['creator']
    if isinstance(creator, dict):
        return creator
    user = await info.context['users'].find_by_id(creator)
    return serialize_user(user) if user else None


def _required(input_data: dict | None) -> dict:
    if input_data is None:
        raise InvalidInput('Invalid data entered!')
    return input_data


def _creator_id(post: dict):
    creator = post['creator']
    return creator['_id'] if isinstance(creator, dict) else creator


QUERIES = {
    'signIn': sign_in,
    'getPosts': get_posts,
    'getPostById': get_post_by_id,
    'getUser': get_user,
}

MUTATIONS = {
    'createUser': create_user,
    'createPost': create_post,
    'updatePost': update_post,
    'deletePost': delete_post,
    'updateStatus': update_status,
}

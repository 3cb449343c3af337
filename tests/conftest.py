import uuid
from datetime import timedelta

import pytest
from ariadne import graphql
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from blogapi.auth import ANONYMOUS, Authenticated
from blogapi.config import Settings
from blogapi.gql.app import format_error, make_schema
from blogapi.main import create_app
from blogapi.models.user import new_user
from blogapi.repositories.posts import PostRepository
from blogapi.repositories.users import UserRepository
from blogapi.utils.files import ImageStorage
from blogapi.utils.security import create_access_token, hash_password

SECRET = "test-secret"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        SECRET_KEY=SECRET,
        IMAGES_DIR=str(tmp_path / "images"),
        PASSWORD_HASH_ROUNDS=4,
    )


@pytest.fixture
def database():
    return AsyncMongoMockClient()[f"test_{uuid.uuid4().hex}"]


@pytest.fixture
def users(database):
    return UserRepository(database)


@pytest.fixture
def posts(database):
    return PostRepository(database)


@pytest.fixture
def images(settings):
    return ImageStorage(settings.IMAGES_DIR)


@pytest.fixture
def execute(settings, users, posts, images):
    """Run a GraphQL document against the schema with a given identity."""
    schema = make_schema()

    async def _execute(query, variables=None, identity=ANONYMOUS):
        context = {
            "request": None,
            "identity": identity,
            "settings": settings,
            "users": users,
            "posts": posts,
            "images": images,
        }
        _, result = await graphql(
            schema,
            {"query": query, "variables": variables or {}},
            context_value=context,
            error_formatter=format_error,
        )
        return result

    return _execute


@pytest.fixture
def make_user(users):
    async def _make_user(email="a@x.com", password="secret", name="Alice"):
        return await users.save(new_user(name, email, hash_password(password, rounds=4)))

    return _make_user


@pytest.fixture
def identity_for():
    def _identity_for(user):
        return Authenticated(user_id=str(user["_id"]), email=user["email"])

    return _identity_for


@pytest.fixture
def token_for():
    def _token_for(user, secret=SECRET, expires_delta=timedelta(hours=1)):
        return create_access_token(
            {"email": user["email"], "userId": str(user["_id"])}, secret, expires_delta=expires_delta
        )

    return _token_for


@pytest.fixture
def app(settings, database):
    return create_app(settings, database)


@pytest.fixture
def client(app):
    return TestClient(app)

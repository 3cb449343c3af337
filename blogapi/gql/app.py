import logging
import os

from ariadne import ObjectType, load_schema_from_path, make_executable_schema
from ariadne.asgi import GraphQL
from ariadne.asgi.handlers import GraphQLHTTPHandler
from ariadne.explorer import ExplorerGraphiQL, ExplorerHttp405
from graphql import GraphQLError, GraphQLSchema

from blogapi.auth import ANONYMOUS
from blogapi.errors import ApiError
from blogapi.gql.resolvers import MUTATIONS, QUERIES, resolve_post_creator, resolve_user_posts

logger = logging.getLogger('blogapi.gql')

SCHEMA_PATH = os.path.join(os.path.dirname(__file__), 'schema.graphql')


def make_schema() -> GraphQLSchema:
    query = ObjectType('RootQuery')
    mutation = ObjectType('RootMutation')
    for name, resolver in QUERIES.items():
        query.set_field(name, resolver)
    for name, resolver in MUTATIONS.items():
        mutation.set_field(name, resolver)

    user = ObjectType('User')
    user.set_field('posts', resolve_user_posts)
    post = ObjectType('Post')
    post.set_field('creator', resolve_post_creator)

    type_defs = load_schema_from_path(SCHEMA_PATH)
    return make_executable_schema(type_defs, query, mutation, user, post)


def get_context_value(request, data=None) -> dict:
    state = request.app.state
    return {
        'request': request,
        'identity': getattr(request.state, 'identity', ANONYMOUS),
        'settings': state.settings,
        'users': state.users,
        'posts': state.posts,
        'images': state.images,
    }


def format_error(error: GraphQLError, debug: bool = False) -> dict:
    """Flatten resolver failures to ``{message, status, data}``.

    Syntax and validation errors have no original error and keep the
    default GraphQL shape.
    """
    original = error.original_error
    if original is None:
        return error.formatted
    if isinstance(original, ApiError):
        return {'message': error.message, 'status': original.status_code, 'data': original.data}
    logger.error(f'Unexpected error while resolving {error.path}: {original!r}')
    return {'message': error.message or 'An error ocurred!', 'status': 500, 'data': None}


def create_graphql_app(schema: GraphQLSchema, graphiql: bool = True) -> GraphQL:
    return GraphQL(
        schema,
        context_value=get_context_value,
        error_formatter=format_error,
        explorer=ExplorerGraphiQL() if graphiql else ExplorerHttp405(),
        http_handler=GraphQLHTTPHandler(),
        execute_get_queries=True,
    )

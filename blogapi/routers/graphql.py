from fastapi import APIRouter, Request

router = APIRouter(tags=["GraphQL"])


# La app de Ariadne se guarda en app.state al construir la aplicación.
# Ariadne ejecuta GET (solo queries) y POST; al resto responde 405.
@router.api_route("/graphql", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def graphql_endpoint(request: Request):
    return await request.app.state.graphql.handle_request(request)

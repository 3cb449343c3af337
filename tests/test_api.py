import os

CREATE_USER = """
mutation { createUser(userInput: {email: "a@x.com", name: "Alice", password: "secret"}) { _id email } }
"""

SIGN_IN = 'query SignIn($password: String!) { signIn(email: "a@x.com", password: $password) { token userId } }'

CREATE_POST = """
mutation {
    createPost(postInput: {title: "Hello World", content: "This is a test post", imageUrl: "images/a.png"}) {
        _id title creator { _id }
    }
}
"""

UPDATE_POST = """
mutation UpdatePost($id: ID!) {
    updatePost(id: $id, postInput: {title: "Hello again", content: "Changed content", imageUrl: "undefined"}) { _id }
}
"""


def gql(client, query, variables=None, token=None):
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    response = client.post("/graphql", json={"query": query, "variables": variables or {}}, headers=headers)
    # Field errors travel in the body; the HTTP status depends on whether any data came back
    assert response.headers["content-type"].startswith("application/json"), response.text
    return response.json()


def sign_up_and_in(client, email="a@x.com", name="Alice"):
    query = f'mutation {{ createUser(userInput: {{email: "{email}", name: "{name}", password: "secret"}}) {{ _id }} }}'
    gql(client, query)
    result = gql(client, f'{{ signIn(email: "{email}", password: "secret") {{ token userId }} }}')
    return result["data"]["signIn"]


def test_register_sign_in_and_ownership_scenario(client):
    created = gql(client, CREATE_USER)["data"]["createUser"]
    assert created["email"] == "a@x.com"

    duplicate = gql(client, CREATE_USER)
    assert duplicate["errors"][0]["message"] == "Email already exists!"
    assert duplicate["errors"][0]["status"] == 422

    wrong = gql(client, SIGN_IN, {"password": "wrong!"})
    assert wrong["errors"][0]["status"] == 401

    auth = gql(client, SIGN_IN, {"password": "secret"})["data"]["signIn"]
    assert auth["userId"] == created["_id"]

    post = gql(client, CREATE_POST, token=auth["token"])["data"]["createPost"]
    assert post["creator"]["_id"] == created["_id"]

    other = sign_up_and_in(client, email="b@x.com", name="Bob")
    fetched = gql(client, 'query Get($id: ID!) { getPostById(id: $id) { _id } }', {"id": post["_id"]}, other["token"])
    assert fetched["data"]["getPostById"]["_id"] == post["_id"]

    denied = gql(client, UPDATE_POST, {"id": post["_id"]}, other["token"])
    assert denied["errors"][0]["message"] == "Not authorizated!"
    assert denied["errors"][0]["status"] == 403


def test_error_shape_for_unauthenticated_request(client):
    result = gql(client, "{ getUser { _id } }")
    assert result["data"] is None
    assert result["errors"] == [{"message": "Not authenticated!", "status": 401, "data": None}]


def test_invalid_token_is_treated_as_anonymous(client):
    result = gql(client, "{ getUser { _id } }", token="not-a-token")
    assert result["errors"][0]["status"] == 401


def test_graphiql_explorer_is_served(client):
    response = client.get("/graphql", headers={"Accept": "text/html"})
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]


def test_options_short_circuits(client):
    response = client.options("/graphql")
    assert response.status_code == 200


def test_cors_headers(client):
    response = client.post(
        "/graphql",
        json={"query": "{ getUser { _id } }"},
        headers={"Origin": "http://localhost:3000"},
    )
    assert response.headers["access-control-allow-origin"] == "*"


def test_upload_requires_authentication(client):
    response = client.put("/post-image", files={"image": ("a.png", b"png", "image/png")})
    assert response.status_code == 401
    assert response.json() == {"message": "Not authenticated!", "data": None}


def test_upload_without_file(client):
    auth = sign_up_and_in(client)
    response = client.put("/post-image", data={"oldPath": ""}, headers={"Authorization": f"Bearer {auth['token']}"})
    assert response.status_code == 200
    assert response.json() == {"message": "No file provided!"}


def test_upload_rejects_non_images(client):
    auth = sign_up_and_in(client)
    response = client.put(
        "/post-image",
        files={"image": ("notes.txt", b"hello", "text/plain")},
        headers={"Authorization": f"Bearer {auth['token']}"},
    )
    assert response.status_code == 200
    assert response.json()["message"] == "No file provided!"


def test_upload_stores_and_serves_image(client, settings):
    auth = sign_up_and_in(client)
    headers = {"Authorization": f"Bearer {auth['token']}"}

    response = client.put("/post-image", files={"image": ("a.png", b"first", "image/png")}, headers=headers)
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "File stored!"
    first_path = body["filePath"]
    assert first_path.startswith("images/") and first_path.endswith("-a.png")

    served = client.get(f"/{first_path}")
    assert served.status_code == 200
    assert served.content == b"first"

    response = client.put(
        "/post-image",
        files={"image": ("b.jpg", b"second", "image/jpeg")},
        data={"oldPath": first_path},
        headers=headers,
    )
    assert response.status_code == 201
    assert not os.path.exists(os.path.join(settings.IMAGES_DIR, os.path.basename(first_path)))
    assert os.path.exists(os.path.join(settings.IMAGES_DIR, os.path.basename(response.json()["filePath"])))


def test_get_request_executes_query(client):
    auth = sign_up_and_in(client)
    response = client.get(
        "/graphql",
        params={"query": "{ getUser { _id name } }"},
        headers={"Authorization": f"Bearer {auth['token']}"},
    )
    assert response.status_code == 200
    assert response.json() == {"data": {"getUser": {"_id": auth["userId"], "name": "Alice"}}}


def test_unsupported_method_on_graphql(client):
    response = client.delete("/graphql")
    assert response.status_code == 405


def test_preflight_with_unlisted_header_still_succeeds(client):
    response = client.options(
        "/graphql",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "X-Requested-With",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert "Authorization" in response.headers["access-control-allow-headers"]

from localstorage.router import (
    CorsSettings,
    api_path_from_server_url,
    doc_path_for,
    is_local_address,
    serve_doc,
    v1_token,
    v2_token,
)


def test_cors_headers_for_origin():
    cors = CorsSettings()
    headers = cors.headers("http://localhost:8080")
    assert headers["Access-Control-Allow-Origin"] == "*"
    assert headers["Access-Control-Allow-Credentials"] == "true"
    assert headers["Access-Control-Max-Age"] == "172800"
    assert "Authorization" in headers["Access-Control-Allow-Headers"].split(",")
    assert headers["Access-Control-Allow-Methods"].split(",") == cors.allow_methods


def test_cors_without_origin():
    assert CorsSettings().headers("") == {"Vary": "Origin"}


def test_cors_origin_not_allowed():
    cors = CorsSettings(allow_origins=["http://localhost"])
    assert "Access-Control-Allow-Origin" not in cors.headers("http://other.localhost")
    allowed = cors.headers("http://localhost")
    assert allowed["Access-Control-Allow-Origin"] == "http://localhost"


def test_cors_expose_headers():
    cors = CorsSettings()
    exposed = cors.headers("http://localhost")["Access-Control-Expose-Headers"]
    assert exposed.split(", ") == cors.expose_headers


def test_api_path_from_server_url():
    assert api_path_from_server_url("http://localhost/v2/local_storage/") == (
        "/v2/local_storage"
    )
    assert api_path_from_server_url("/v2/local_storage") == "/v2/local_storage"


def test_doc_path_for():
    api = api_path_from_server_url("http://localhost/v2/local_storage")
    assert doc_path_for(api) == "/doc" + api


def test_serve_doc():
    doc = doc_path_for("/v2/local_storage")
    assert serve_doc(doc, doc, "<html/>", "openapi: 3") == "<html/>"
    assert serve_doc(doc + "/openapi.yaml", doc, "<html/>", "openapi: 3") == "openapi: 3"
    assert serve_doc("/elsewhere", doc, "<html/>", "openapi: 3") == ""


def test_is_local_address():
    assert is_local_address("::1")
    assert is_local_address("127.0.0.1")
    assert not is_local_address("192.168.1.2")


def test_v1_token_prefers_header():
    assert v1_token({"Authorization": "Bearer token"}, {"token": "token"}) == (
        "Bearer token"
    )


def test_v1_token_falls_back_to_query():
    assert v1_token({}, {"token": "token"}) == "token"
    assert v1_token({"Authorization": ""}, {"token": "token"}) == "token"
    assert v1_token({}, {}) == ""


def test_v2_token_header_only():
    assert v2_token({"authorization": "Bearer token"}) == "Bearer token"
    assert v2_token({}) == ""
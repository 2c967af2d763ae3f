import stat

import pytest
from cryptography import x509
from fastapi.testclient import TestClient

from adapters.web.tls import build_ssl_options, convert_pfx_to_pem
from core.domain.entities import (
    CorsSettings,
    NetworkSettings,
    ResolvedConfig,
    TlsCertKeyPair,
    TlsPfxBundle,
)
from core.domain.errors import TlsMaterialError
from web_server import DEFAULT_CORS_METHODS, build_cors_options, create_app

from .conftest import PFX_PASSPHRASE


def _config(**overrides):
    values = {"network": NetworkSettings(host="127.0.0.1", port=8204)}
    values.update(overrides)
    return ResolvedConfig(**values)


def test_healthcheck():
    client = TestClient(create_app(_config()))

    response = client.get("/healthcheck")

    assert response.status_code == 200
    assert response.text == "ok"


def test_redirect_without_bearer_tokens_configured():
    client = TestClient(create_app(_config(redirect_url="https://fhir.example/listener")))

    response = client.get("/redirect?patient=123", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "https://fhir.example/listener?patient=123"


def test_redirect_requires_known_bearer_token():
    config = _config(redirect_url="https://fhir.example/listener", auth_keys=frozenset({"a", "b"}))
    client = TestClient(create_app(config))

    assert client.get("/redirect", follow_redirects=False).status_code == 401
    assert client.get(
        "/redirect", headers={"Authorization": "Bearer c"}, follow_redirects=False
    ).status_code == 401

    response = client.get("/redirect", headers={"Authorization": "Bearer b"}, follow_redirects=False)
    assert response.status_code == 302


def test_redirect_without_target_is_unavailable():
    client = TestClient(create_app(_config()))

    assert client.get("/redirect").status_code == 503


def test_docs_hidden_in_production():
    assert TestClient(create_app(_config())).get("/docs").status_code == 200
    assert TestClient(create_app(_config(is_production=True))).get("/docs").status_code == 404


def test_openapi_tags():
    schema = TestClient(create_app(_config())).get("/openapi.json").json()

    assert [tag["name"] for tag in schema["tags"]] == ["Redirects", "System Administration"]


def test_cors_disabled_by_default():
    assert build_cors_options(CorsSettings()) is None


def test_cors_origin_true_reflects_request_origin():
    options = build_cors_options(CorsSettings(origin=True))

    assert options["allow_origin_regex"] == ".*"
    assert options["allow_methods"] == DEFAULT_CORS_METHODS


def test_cors_origin_list_and_headers():
    options = build_cors_options(
        CorsSettings(
            origin="https://a.example, https://b.example",
            methods="GET,POST",
            allowed_headers="Authorization",
            exposed_headers="Location",
        )
    )

    assert options["allow_origins"] == ["https://a.example", "https://b.example"]
    assert options["allow_methods"] == ["GET", "POST"]
    assert options["allow_headers"] == ["Authorization"]
    assert options["expose_headers"] == ["Location"]


def test_cors_middleware_answers_preflight():
    client = TestClient(create_app(_config(cors=CorsSettings(origin="https://a.example"))))

    response = client.options(
        "/healthcheck",
        headers={"Origin": "https://a.example", "Access-Control-Request-Method": "GET"},
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "https://a.example"


def test_ssl_options_without_tls(tmp_path):
    assert build_ssl_options(None, tmp_path) == {}


def test_ssl_options_for_cert_key_pair(tmp_path, cert_key_files):
    cert_path, key_path = cert_key_files
    tls = TlsCertKeyPair(cert=cert_path.read_bytes(), key=key_path.read_bytes())
    output = tmp_path / "ssl"
    output.mkdir()

    options = build_ssl_options(tls, output)

    assert set(options) == {"ssl_certfile", "ssl_keyfile"}
    with open(options["ssl_keyfile"], "rb") as f:
        assert f.read() == key_path.read_bytes()
    mode = (output / "key.pem").stat().st_mode
    assert not mode & (stat.S_IRGRP | stat.S_IROTH)


def test_pfx_bundle_is_converted_to_pem(pfx_file, certificate):
    _, cert = certificate
    bundle = TlsPfxBundle(pfx=pfx_file.read_bytes(), passphrase=PFX_PASSPHRASE)

    cert_pem, key_pem = convert_pfx_to_pem(bundle)

    assert x509.load_pem_x509_certificate(cert_pem) == cert
    assert b"PRIVATE KEY" in key_pem


def test_pfx_with_wrong_passphrase(pfx_file):
    bundle = TlsPfxBundle(pfx=pfx_file.read_bytes(), passphrase="wrong")

    with pytest.raises(TlsMaterialError):
        convert_pfx_to_pem(bundle)

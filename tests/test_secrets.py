import pytest

from key_rotator.errors import ExternalServiceFailure
from key_rotator.github.secrets import SecretPublisher
from key_rotator.transport import TransportResponse
from key_rotator.utils import b64d
from tests.fakes import FakeTransport, open_sealed


def test_fetches_key_seals_and_upserts():
    transport = FakeTransport()
    publisher = SecretPublisher(transport)

    publisher.create_or_update_environment_secret("org", 42, "staging", "AWS_ACCESS_KEY_ID", "AKIAEXAMPLE")

    assert [(m, p) for m, p, _ in transport.calls] == [
        ("GET", "/repositories/42/environments/staging/secrets/public-key"),
        ("PUT", "/repositories/42/environments/staging/secrets/AWS_ACCESS_KEY_ID"),
    ]
    body = transport.secrets[(42, "staging", "AWS_ACCESS_KEY_ID")]
    assert set(body) == {"encrypted_value", "key_id"}
    assert body["key_id"] == "key-42-staging"
    assert open_sealed(transport.private_key(42, "staging"), b64d(body["encrypted_value"])) == b"AKIAEXAMPLE"


def test_public_key_is_fetched_for_every_secret():
    transport = FakeTransport()
    publisher = SecretPublisher(transport)

    publisher.create_or_update_environment_secret("org", 1, "staging", "A", "x")
    publisher.create_or_update_environment_secret("org", 1, "staging", "B", "y")
    publisher.create_or_update_environment_secret("org", 2, "staging", "A", "x")

    assert len(transport.calls_matching("GET", "public-key")) == 3
    # each environment seals with its own key
    assert transport.secrets[(1, "staging", "A")]["key_id"] != transport.secrets[(2, "staging", "A")]["key_id"]


def test_public_key_failure_aborts_before_upsert():
    class NoKey(FakeTransport):
        def request(self, method, path, payload=None, headers=None):
            self.calls.append((method, path, payload))
            return TransportResponse(404, '{"message": "Not Found"}', "Not Found")

    transport = NoKey()
    with pytest.raises(ExternalServiceFailure, match="Failed to fetch public key"):
        SecretPublisher(transport).create_or_update_environment_secret("org", 1, "staging", "A", "x")
    assert transport.calls_matching("PUT", "") == []


def test_incomplete_public_key_response_is_rejected():
    class EmptyKey(FakeTransport):
        def request(self, method, path, payload=None, headers=None):
            return TransportResponse(200, '{"key_id": "", "key": null}', "OK")

    with pytest.raises(ExternalServiceFailure, match="deserialize public key"):
        SecretPublisher(EmptyKey()).get_public_key(1, "staging")


def test_upsert_failure_logs_diagnostics(caplog):
    transport = FakeTransport()
    transport.fail_put_for.add((7, "AWS_SECRET_ACCESS_KEY"))

    with pytest.raises(ExternalServiceFailure) as exc_info:
        SecretPublisher(transport).create_or_update_environment_secret(
            "org", 7, "staging", "AWS_SECRET_ACCESS_KEY", "plain-secret-value"
        )

    assert exc_info.value.status_code == 422
    assert "URI: /repositories/7/environments/staging/secrets/AWS_SECRET_ACCESS_KEY" in caplog.text
    assert "Request body:" in caplog.text
    assert "Validation Failed" in caplog.text
    # only the sealed value is ever logged
    assert "plain-secret-value" not in caplog.text

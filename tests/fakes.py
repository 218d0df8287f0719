import json
from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlsplit

from nacl import public

from key_rotator.transport import BaseTransport, TransportResponse
from key_rotator.utils import b64e

USER = "cicd-bot-user-test"
T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def key_meta(key_id, status, age_days):
    return {
        "UserName": USER,
        "AccessKeyId": key_id,
        "Status": status,
        "CreateDate": T0 - timedelta(days=age_days),
    }


def new_key_response(key_id="AKIANEWKEY0000000001", secret="s" * 40):
    return {
        "AccessKey": {
            "UserName": USER,
            "AccessKeyId": key_id,
            "Status": "Active",
            "SecretAccessKey": secret,
            "CreateDate": T0,
        }
    }


def sealed_box_generate():
    """Recipient keypair (raw private, raw public), as an environment holds it."""
    sk = public.PrivateKey.generate()
    return bytes(sk), bytes(sk.public_key)


def open_sealed(private_key_raw, ciphertext):
    return public.SealedBox(public.PrivateKey(private_key_raw)).decrypt(ciphertext)


class FakeTransport(BaseTransport):
    """In-memory GitHub API. Records every call as (method, path, payload)."""
    name = "fake"

    def __init__(self, repositories=(), environments=None, page_size=100, recipient_keys=None):
        self.repositories = list(repositories)
        # repo name -> set of environment names
        self.environments = environments or {}
        self.page_size = page_size
        # (repo id, env) -> (key_id, private key raw); created on demand
        self.recipient_keys = recipient_keys if recipient_keys is not None else {}
        self.secrets = {}
        self.calls = []
        self.fail_put_for = set()
        self.closed = False

    def request(self, method, path, payload=None, headers=None):
        self.calls.append((method, path, payload))
        parts = urlsplit(path)
        segments = parts.path.strip("/").split("/")

        if method == "GET" and segments[0] == "orgs" and segments[2] == "repos":
            query = parse_qs(parts.query)
            per_page = int(query["per_page"][0])
            page = int(query["page"][0])
            start = (page - 1) * per_page
            return self._json(200, self.repositories[start:start + per_page])

        if method == "GET" and segments[0] == "repos" and segments[3] == "environments":
            repo, env = segments[2], segments[4]
            if env in self.environments.get(repo, set()):
                return self._json(200, {"id": 1, "name": env})
            return self._json(404, {"message": "Not Found"})

        if segments[0] == "repositories" and segments[-1] == "public-key" and method == "GET":
            repo_id, env = int(segments[1]), segments[3]
            key_id, pub = self._recipient(repo_id, env)
            return self._json(200, {"key_id": key_id, "key": b64e(pub)})

        if method == "PUT" and segments[0] == "repositories" and segments[4] == "secrets":
            repo_id, env, name = int(segments[1]), segments[3], segments[5]
            if (repo_id, name) in self.fail_put_for:
                return TransportResponse(422, '{"message": "Validation Failed"}', "Unprocessable Entity")
            self.secrets[(repo_id, env, name)] = payload
            return TransportResponse(201, "", "Created")

        return self._json(404, {"message": "Not Found"})

    def _recipient(self, repo_id, env):
        if (repo_id, env) not in self.recipient_keys:
            priv, pub = sealed_box_generate()
            self.recipient_keys[(repo_id, env)] = (f"key-{repo_id}-{env}", priv, pub)
        key_id, _, pub = self.recipient_keys[(repo_id, env)]
        return key_id, pub

    def private_key(self, repo_id, env):
        return self.recipient_keys[(repo_id, env)][1]

    def calls_matching(self, method, fragment):
        return [c for c in self.calls if c[0] == method and fragment in c[1]]

    def close(self):
        self.closed = True

    @staticmethod
    def _json(status, body):
        return TransportResponse(status, json.dumps(body), "")

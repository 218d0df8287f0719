import boto3
import pytest
from botocore.stub import Stubber

from key_rotator.settings import RotationSettings
from tests.fakes import USER


@pytest.fixture
def settings():
    return RotationSettings(
        iam_user_name=USER,
        environment="staging",
        secret_name="cicd-bot-github-token",
        organization_name="test-organization",
        secret_region="eu-north-1",
    )


def _client(service):
    return boto3.client(
        service,
        region_name="eu-north-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture
def iam():
    client = _client("iam")
    with Stubber(client) as stubber:
        yield client, stubber
        stubber.assert_no_pending_responses()


@pytest.fixture
def secretsmanager():
    client = _client("secretsmanager")
    with Stubber(client) as stubber:
        yield client, stubber
        stubber.assert_no_pending_responses()

import os

import pytest
from moto import mock_aws

from fakes import REGION, FakeEC2Client, FakeStorageGatewayClient
from resource_acctest.config.manager import get_config_manager
from resource_acctest.config.schemas import AcceptanceConfig, AWSConfig
from resource_acctest.harness import TestRunner
from resource_acctest.infrastructure.aws.aws_client import AWSClient
from resource_acctest.infrastructure.resilience import RetryConfig


def live_enabled() -> bool:
    return os.environ.get('ACCTEST_LIVE', '').lower() in ('1', 'true', 'yes')


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Mocked AWS Credentials for moto."""
    if live_enabled():
        return
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SECURITY_TOKEN', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', REGION)


@pytest.fixture
def sleeps():
    """Records requested sleeps instead of sleeping."""
    return []


@pytest.fixture
def retry_config():
    return RetryConfig(max_attempts=3, base_delay=0.5, max_delay=2.0)


@pytest.fixture
def acceptance_config():
    return AcceptanceConfig(create_timeout=60, delete_timeout=60, poll_base_delay=1.0, poll_max_delay=5.0)


@pytest.fixture
def storagegateway():
    return FakeStorageGatewayClient()


@pytest.fixture
def ec2():
    return FakeEC2Client()


@pytest.fixture
def aws_client(storagegateway, ec2):
    """AWS client with moto-backed STS and in-memory service fakes."""
    with mock_aws():
        client = AWSClient(region_name=REGION, config=AWSConfig(region=REGION))
        client.storagegateway_client = storagegateway
        client.ec2_client = ec2
        yield client


@pytest.fixture
def controller_kwargs(retry_config, acceptance_config, sleeps):
    return {
        'retry_config': retry_config,
        'acceptance': acceptance_config,
        'sleep': sleeps.append,
    }


@pytest.fixture
def runner(aws_client, controller_kwargs):
    return TestRunner(aws_client, **controller_kwargs)


@pytest.fixture
def acc_runner(request):
    """Scenario runner: live AWS when ACCTEST_LIVE is set, otherwise the in-memory fakes."""
    if live_enabled():
        app_config = get_config_manager().app_config
        client = AWSClient(config=app_config.aws)
        return TestRunner(client, retry_config=app_config.retry, acceptance=app_config.acceptance)
    return request.getfixturevalue('runner')

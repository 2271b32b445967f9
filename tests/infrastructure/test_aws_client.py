import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws
from unittest.mock import Mock

from resource_acctest.config.schemas import AWSConfig
from resource_acctest.infrastructure.aws.aws_client import AWSClient
from resource_acctest.infrastructure.exceptions import CredentialsError, InfrastructureError


@pytest.fixture
def moto_client():
    """Create AWS client with test configuration."""
    with mock_aws():
        yield AWSClient(region_name='us-east-1',
                        config=AWSConfig(request_retry_attempts=4, connection_timeout_ms=2500))


@pytest.mark.aws
def test_client_configuration(moto_client):
    assert moto_client.region_name == 'us-east-1'
    assert moto_client.settings.request_retry_attempts == 4
    assert moto_client.config.retries['mode'] == 'standard'
    assert moto_client.config.connect_timeout == 2.5
    assert moto_client.ec2_client.meta.region_name == 'us-east-1'
    assert moto_client.storagegateway_client.meta.service_model.service_name == 'storagegateway'


@pytest.mark.aws
def test_caller_identity_recorded(moto_client):
    assert moto_client.account_id == '123456789012'
    assert moto_client.partition == 'aws'


@pytest.mark.aws
def test_regional_arn(moto_client):
    assert moto_client.regional_arn('ec2', 'placement-group/pg') == (
        'arn:aws:ec2:us-east-1:123456789012:placement-group/pg'
    )


@pytest.mark.aws
def test_region_defaults_to_config():
    with mock_aws():
        client = AWSClient(config=AWSConfig(region='eu-central-1'))
    assert client.region_name == 'eu-central-1'


@pytest.mark.aws
def test_deferred_credential_validation():
    with mock_aws():
        client = AWSClient(config=AWSConfig(validate_credentials=False))
        assert client.account_id is None
        assert client.ensure_identity() == '123456789012'


@pytest.mark.aws
def test_moto_ec2_reachable(moto_client):
    response = moto_client.ec2_client.describe_regions()
    assert response['Regions']


@pytest.mark.aws
def test_invalid_credentials():
    session = Mock(spec=boto3.session.Session)
    sts = Mock()
    sts.get_caller_identity.side_effect = ClientError(
        {'Error': {'Code': 'InvalidClientTokenId', 'Message': 'The security token is invalid'}},
        'GetCallerIdentity',
    )
    session.client.return_value = sts

    with pytest.raises(CredentialsError, match="Failed to validate AWS credentials") as exc_info:
        AWSClient(region_name='us-east-1', session=session)
    assert isinstance(exc_info.value, InfrastructureError)

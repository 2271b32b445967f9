import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from typing import Any, Optional

from resource_acctest.config.schemas import AWSConfig
from resource_acctest.domain.resource.value_objects import AWSARN
from resource_acctest.helpers.logger import get_logger
from resource_acctest.infrastructure.exceptions import CredentialsError

logger = get_logger(__name__)


class AWSClient:
    """
    Centralized AWS client management.

    Holds the botocore configuration, the caller identity and the service
    clients the resource controllers and the verification harness need.
    One instance is passed explicitly to every controller and check.
    """

    def __init__(self, region_name: Optional[str] = None, config: Optional[AWSConfig] = None,
                 session: Optional[boto3.session.Session] = None):
        """
        Initialize AWS client with configuration.

        Args:
            region_name: AWS region name; defaults to ``config.region``
            config: AWS settings
            session: Pre-built boto3 session (tests and custom credential chains)

        Raises:
            CredentialsError: If AWS credentials validation fails
        """
        self.settings = config or AWSConfig()
        self.region_name = region_name or self.settings.region
        self.config = Config(
            region_name=self.region_name,
            retries={
                'max_attempts': self.settings.request_retry_attempts,
                'mode': 'standard'
            },
            connect_timeout=self.settings.connection_timeout_ms / 1000
        )
        self.session = session or boto3.session.Session(
            profile_name=self.settings.profile,
            region_name=self.region_name
        )

        self.account_id: Optional[str] = None
        self.partition = 'aws'
        self.sts_client = self._client('sts')
        if self.settings.validate_credentials:
            self._validate_credentials()

        self.storagegateway_client = self._client('storagegateway')
        self.ec2_client = self._client('ec2')

    def _client(self, service_name: str) -> Any:
        return self.session.client(
            service_name,
            region_name=self.region_name,
            endpoint_url=self.settings.endpoint_url,
            config=self.config
        )

    def _validate_credentials(self) -> None:
        try:
            identity = self.sts_client.get_caller_identity()
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to validate AWS credentials", error=str(e))
            raise CredentialsError(f"Failed to validate AWS credentials: {str(e)}")

        self.account_id = identity['Account']
        # arn:<partition>:sts::<account>:assumed-role/...
        caller_arn = identity.get('Arn', '')
        if caller_arn.startswith('arn:'):
            self.partition = caller_arn.split(':')[1]
        logger.debug("Validated AWS credentials", account_id=self.account_id,
                     partition=self.partition, region=self.region_name)

    def ensure_identity(self) -> str:
        """Account id of the caller, resolving it through STS on first use."""
        if self.account_id is None:
            self._validate_credentials()
        return self.account_id

    def regional_arn(self, service: str, resource: str) -> str:
        """Build ``arn:<partition>:<service>:<region>:<account>:<resource>`` for this caller."""
        account_id = self.ensure_identity()
        return str(AWSARN.build(self.partition, service, self.region_name, account_id, resource))

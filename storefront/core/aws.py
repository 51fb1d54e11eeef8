# storefront/core/aws.py
# Lazily created boto3 clients (S3, DynamoDB, SQS, SNS), one set per application context.
import logging

import boto3

logger = logging.getLogger(__name__)


class AwsClients:
    """Creates each client on first access and reuses it afterwards."""

    def __init__(self, s3_region: str, dynamodb_region: str, session: boto3.session.Session | None = None):
        self.s3_region = s3_region
        self.dynamodb_region = dynamodb_region
        self._session = session
        self._clients: dict[str, object] = {}

    @property
    def session(self) -> boto3.session.Session:
        if self._session is None:
            self._session = boto3.session.Session()
        return self._session

    def _get(self, key: str, factory):
        if key not in self._clients:
            self._clients[key] = factory()
            logger.info(f"[AWS] {key} client created")
        return self._clients[key]

    @property
    def s3(self):
        return self._get("S3", lambda: self.session.client("s3", region_name=self.s3_region))

    @property
    def dynamodb(self):
        """DynamoDB resource; Table objects convert Python values to attribute values."""
        return self._get("DynamoDB", lambda: self.session.resource("dynamodb", region_name=self.dynamodb_region))

    @property
    def sqs(self):
        return self._get("SQS", lambda: self.session.client("sqs", region_name=self.s3_region))

    @property
    def sns(self):
        return self._get("SNS", lambda: self.session.client("sns", region_name=self.s3_region))

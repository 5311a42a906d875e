"""
S3Client - Object store operations against S3/MinIO/R2.
"""

import logging
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from .s3_config import S3Config


MISSING_KEY_CODES = ('404', 'NoSuchKey', 'NotFound')


class S3Client:
    """
    Object store backed by an S3-compatible bucket.
    
    Keys are media filenames; the configured prefix is applied here.
    """
    
    def __init__(self, config: S3Config, logger: Optional[logging.Logger] = None):
        """
        Initialize S3 client.
        
        Args:
            config: S3 configuration
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        
        self._client = boto3.client(
            's3',
            endpoint_url=config.endpoint,
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
            region_name=config.region,
            config=Config(
                signature_version='s3v4',
                s3={'addressing_style': 'path'}
            ),
            verify=config.verify_ssl
        )
    
    @property
    def client(self):
        """Return the underlying boto3 client."""
        return self._client
    
    def put(self, key: str, data: bytes, content_type: str = 'application/octet-stream') -> None:
        """Upload an object."""
        full_key = self.config.key_for(key)
        self.logger.debug(f"PUT s3://{self.config.bucket}/{full_key} ({len(data)} bytes)")
        self._client.put_object(
            Bucket=self.config.bucket,
            Key=full_key,
            Body=data,
            ContentType=content_type
        )
    
    def get(self, key: str) -> Optional[bytes]:
        """Download an object, or return None if it does not exist."""
        try:
            response = self._client.get_object(
                Bucket=self.config.bucket,
                Key=self.config.key_for(key)
            )
        except ClientError as e:
            if e.response['Error']['Code'] in MISSING_KEY_CODES:
                return None
            raise
        return response['Body'].read()
    
    def delete(self, key: str) -> None:
        """Delete an object. Deleting a missing key is not an error on S3."""
        full_key = self.config.key_for(key)
        self.logger.debug(f"DELETE s3://{self.config.bucket}/{full_key}")
        self._client.delete_object(Bucket=self.config.bucket, Key=full_key)
    
    def exists(self, key: str) -> bool:
        """Check if an object exists."""
        try:
            self._client.head_object(Bucket=self.config.bucket, Key=self.config.key_for(key))
            return True
        except ClientError as e:
            if e.response['Error']['Code'] in MISSING_KEY_CODES:
                return False
            raise
    
    def public_url(self, key: str) -> Optional[str]:
        """Direct public URL for a key, if the bucket has a public base URL."""
        if not self.config.public_url:
            return None
        return f"{self.config.public_url.rstrip('/')}/{self.config.key_for(key)}"

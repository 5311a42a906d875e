"""
S3Config - Configuration for S3-compatible object stores (S3, MinIO, R2).
"""

import os
from dataclasses import dataclass
from typing import List, Optional


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in ('0', 'false', 'no', 'off')


@dataclass
class S3Config:
    """
    S3 connection settings.
    
    Attributes:
        endpoint: Endpoint URL (None for AWS default)
        bucket: Bucket holding media files
        prefix: Optional key prefix for all objects (e.g., 'media')
        access_key: Access key ID
        secret_key: Secret access key
        region: Region name
        public_url: Public base URL for stored objects, if the bucket is exposed
        verify_ssl: Verify TLS certificates
    """
    endpoint: Optional[str] = None
    bucket: Optional[str] = None
    prefix: str = ''
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    region: Optional[str] = None
    public_url: Optional[str] = None
    verify_ssl: bool = True
    
    @classmethod
    def from_env(cls) -> 'S3Config':
        """Load configuration from S3_* environment variables."""
        return cls(
            endpoint=os.getenv('S3_ENDPOINT'),
            bucket=os.getenv('S3_BUCKET'),
            prefix=os.getenv('S3_PREFIX', ''),
            access_key=os.getenv('S3_ACCESS_KEY'),
            secret_key=os.getenv('S3_SECRET_KEY'),
            region=os.getenv('S3_REGION'),
            public_url=os.getenv('S3_PUBLIC_URL'),
            verify_ssl=_env_flag('S3_VERIFY_SSL', True),
        )
    
    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty if valid)."""
        errors = []
        if not self.bucket:
            errors.append("S3 bucket is required (set S3_BUCKET or --s3-bucket)")
        if bool(self.access_key) != bool(self.secret_key):
            errors.append("S3 access key and secret key must be set together")
        return errors
    
    def key_for(self, name: str) -> str:
        """Full object key for a media filename."""
        name = name.lstrip('/')
        prefix = self.prefix.strip('/')
        return f"{prefix}/{name}" if prefix else name

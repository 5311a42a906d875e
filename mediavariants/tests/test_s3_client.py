"""Tests for S3Client class."""

import pytest
from unittest.mock import MagicMock, patch
from botocore.exceptions import ClientError

from mediavariants.s3_client import S3Client
from mediavariants.s3_config import S3Config


class TestS3Client:
    """Tests for S3Client class."""
    
    @pytest.fixture
    def config(self):
        """Fixture providing S3 config."""
        return S3Config(
            endpoint='https://test-endpoint.example.com:9000',
            bucket='test-bucket',
            prefix='media',
            access_key='test-access-key',
            secret_key='test-secret-key',
            region='auto',
            public_url='https://cdn.example.com',
        )
    
    @pytest.fixture
    def client_with_mock(self, config):
        """Fixture providing S3Client with mocked boto3."""
        mock_boto = MagicMock()
        with patch('mediavariants.s3_client.boto3.client', return_value=mock_boto):
            client = S3Client(config)
            client._test_mock = mock_boto
            yield client
    
    def test_put(self, client_with_mock):
        client_with_mock.put('page-avatar.png', b'data', 'image/png')
        
        client_with_mock._test_mock.put_object.assert_called_once_with(
            Bucket='test-bucket',
            Key='media/page-avatar.png',
            Body=b'data',
            ContentType='image/png',
        )
    
    def test_put_error_propagates(self, client_with_mock):
        client_with_mock._test_mock.put_object.side_effect = ClientError(
            {'Error': {'Code': 'AccessDenied'}},
            'PutObject'
        )
        
        with pytest.raises(ClientError):
            client_with_mock.put('a.jpg', b'data', 'image/jpeg')
    
    def test_get(self, client_with_mock):
        mock_body = MagicMock()
        mock_body.read.return_value = b'image data'
        client_with_mock._test_mock.get_object.return_value = {'Body': mock_body}
        
        result = client_with_mock.get('page.jpg')
        
        assert result == b'image data'
        client_with_mock._test_mock.get_object.assert_called_once_with(
            Bucket='test-bucket', Key='media/page.jpg'
        )
    
    def test_get_missing_returns_none(self, client_with_mock):
        client_with_mock._test_mock.get_object.side_effect = ClientError(
            {'Error': {'Code': 'NoSuchKey'}},
            'GetObject'
        )
        
        assert client_with_mock.get('missing.jpg') is None
    
    def test_get_other_error_raises(self, client_with_mock):
        client_with_mock._test_mock.get_object.side_effect = ClientError(
            {'Error': {'Code': 'AccessDenied'}},
            'GetObject'
        )
        
        with pytest.raises(ClientError):
            client_with_mock.get('secret.jpg')
    
    def test_delete(self, client_with_mock):
        client_with_mock.delete('page-avatar.png')
        
        client_with_mock._test_mock.delete_object.assert_called_once_with(
            Bucket='test-bucket', Key='media/page-avatar.png'
        )
    
    def test_exists_false(self, client_with_mock):
        client_with_mock._test_mock.head_object.side_effect = ClientError(
            {'Error': {'Code': '404'}},
            'HeadObject'
        )
        
        assert client_with_mock.exists('nonexistent.jpg') is False
    
    def test_public_url(self, client_with_mock):
        assert client_with_mock.public_url('a.jpg') == 'https://cdn.example.com/media/a.jpg'
    
    def test_public_url_unset(self, config):
        config.public_url = None
        with patch('mediavariants.s3_client.boto3.client', return_value=MagicMock()):
            client = S3Client(config)
        
        assert client.public_url('a.jpg') is None


class TestS3Config:
    """Tests for S3Config."""
    
    def test_from_env(self, monkeypatch):
        monkeypatch.setenv('S3_ENDPOINT', 'https://r2.example.com')
        monkeypatch.setenv('S3_BUCKET', 'media-bucket')
        monkeypatch.setenv('S3_ACCESS_KEY', 'key')
        monkeypatch.setenv('S3_SECRET_KEY', 'secret')
        monkeypatch.setenv('S3_VERIFY_SSL', 'false')
        monkeypatch.delenv('S3_PREFIX', raising=False)
        
        config = S3Config.from_env()
        
        assert config.endpoint == 'https://r2.example.com'
        assert config.bucket == 'media-bucket'
        assert config.prefix == ''
        assert config.verify_ssl is False
        assert config.validate() == []
    
    def test_validate_requires_bucket(self):
        errors = S3Config().validate()
        
        assert any('bucket' in e for e in errors)
    
    def test_validate_key_pair(self):
        errors = S3Config(bucket='b', access_key='only-key').validate()
        
        assert len(errors) == 1
    
    def test_key_for(self):
        assert S3Config(prefix='/media/').key_for('a.jpg') == 'media/a.jpg'
        assert S3Config(prefix='').key_for('/a.jpg') == 'a.jpg'

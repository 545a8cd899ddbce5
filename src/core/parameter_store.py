"""
AWS Systems Manager Parameter Store helper.
Fetches service secrets with caching to minimize API calls.
"""
import boto3
from functools import lru_cache

PARAMETER_PREFIX = "/mess-import-api"


@lru_cache(maxsize=10)
def get_parameter(parameter_name: str, region: str = "us-east-1") -> str:
    """
    Fetch parameter from Parameter Store with caching.

    Args:
        parameter_name: Full parameter name (e.g., /mess-import-api/dev/jwt-secret)
        region: AWS region

    Returns:
        Parameter value (decrypted if SecureString)
    """
    ssm = boto3.session.Session().client('ssm', region_name=region)
    response = ssm.get_parameter(Name=parameter_name, WithDecryption=True)
    return response['Parameter']['Value']


def get_jwt_secret(environment: str, region: str) -> str:
    """Fetch the token signing secret for an environment."""
    return get_parameter(f"{PARAMETER_PREFIX}/{environment}/jwt-secret", region)

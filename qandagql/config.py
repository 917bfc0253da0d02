import os
from typing import Optional


def get_ssm_param(param_name: str) -> str:
    """Get an encrypted AWS Systems Manger secret."""
    import boto3
    ssm = boto3.client('ssm')
    response = ssm.get_parameters(
        Names=[param_name],
        WithDecryption=True,
    )
    if not response['Parameters'] or not response['Parameters'][0] or not response['Parameters'][0]['Value']:
        raise Exception(
            f"Configuration error: missing AWS SSM parameter: {param_name}")
    return response['Parameters'][0]['Value']


def env_or_ssm(name: str, default: Optional[str] = None) -> Optional[str]:
    """Read `name` from the environment.

    When unset, fall back to the SSM parameter named by `<name>_SSM_PARAM`
    (if that is set), then to `default`.
    """
    value = os.getenv(name)
    if value:
        return value
    param_name = os.getenv(f'{name}_SSM_PARAM')
    if param_name:
        return get_ssm_param(param_name)
    return default


###

# single table holding questions (and their embedded answers)
DYNAMODB_TABLE = env_or_ssm('DYNAMODB_TABLE', 'qanda')

# identity provider host serving /oauth2/token
COGNITO_DOMAIN = env_or_ssm('COGNITO_DOMAIN')

# GraphQL API host serving /graphql
APPSYNC_DOMAIN = env_or_ssm('APPSYNC_DOMAIN')

LIST_QUESTIONS_LIMIT = 5

# seconds
UPSTREAM_TIMEOUT = float(os.getenv('UPSTREAM_TIMEOUT', '10'))

import boto3


def get_table(name: str, dynamodb=None):
    """Get a handle on the questions table.

    Call once per process and pass the result around; the underlying
    connection pool is reused by every request.
    """
    if dynamodb is None:
        dynamodb = boto3.resource('dynamodb')
    return dynamodb.Table(name)


__all__ = ('get_table',)

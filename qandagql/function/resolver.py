"""AppSync Lambda data source for the question fields."""
import logging

from qandagql import config
from qandagql.model import Model
from qandagql.resolver import Resolver
from qandagql.table import get_table

log = logging.getLogger(__name__)

# built once per container, shared by every invocation
resolver = Resolver(Model(get_table(config.DYNAMODB_TABLE)))


def lambda_handler(event, context):
    log.info(f"resolving {event['info']['fieldName']}")
    return resolver.handle_event(event)

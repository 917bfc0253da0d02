import os
from flask import Flask
import logging

log = logging.getLogger(__name__)


def boto_setup():
    import boto3
    boto3.set_stream_logger('botocore', level=logging.WARNING)


# init AWS
boto_setup()

# init logging
logging.basicConfig(level=os.getenv('LOG_LEVEL', 'INFO'))
logging.getLogger('botocore.vendored.requests.packages.urllib3.connectionpool').setLevel(logging.WARNING)
logging.getLogger('urllib3.connectionpool').setLevel(logging.WARNING)
logging.getLogger('botocore.credentials').setLevel(logging.WARNING)

##############


def create_app(config=None, gateway=None) -> Flask:
    """Build the gateway Flask app.

    The gateway and its upstream clients are constructed once here and bound
    to the routes; request handlers never build their own.
    """
    from qandagql.gateway import Gateway
    import qandagql.views.api
    import qandagql.views.index

    app = Flask(__name__, static_folder=None)
    # load config
    app.config.from_pyfile('config.py', silent=False)
    # optional local config
    app.config.from_pyfile('local.cfg', silent=True)
    if config:
        app.config.from_mapping(config)

    # /questions//answers must not be collapsed into /questions/answers
    app.url_map.merge_slashes = False

    if gateway is None:
        gateway = Gateway.from_config(app.config)

    qandagql.views.index.register(app)
    qandagql.views.api.register(app, gateway)
    log.debug(f"gateway app ready (idp={app.config.get('COGNITO_DOMAIN')}, api={app.config.get('APPSYNC_DOMAIN')})")
    return app


__all__ = ('create_app',)

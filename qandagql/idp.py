import logging
from typing import Dict, Optional, Tuple
import requests
import simplejson as json

from qandagql.errors import UpstreamError

log = logging.getLogger(__name__)


class IdentityProvider:
    """OAuth2 token endpoint of the user pool."""

    def __init__(self, domain: str, session: requests.Session = None, timeout: float = 10):
        self.domain = domain
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def token_url(self) -> str:
        return f"https://{self.domain}/oauth2/token"

    def exchange_token(self, body: bytes, authorization: Optional[str], content_type: Optional[str]) -> Tuple[int, Dict]:
        """Pass a token request through to the identity provider.

        The response fields are returned as-is, except that `access_token` is
        replaced by the `id_token` so clients can use the identity token as
        their bearer token. No `id_token` means no `access_token`.

        :returns: (upstream status code, response body)
        """
        headers = {}
        if authorization:
            headers['Authorization'] = authorization
        if content_type:
            headers['Content-Type'] = content_type

        try:
            res = self.session.post(self.token_url, data=body, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamError(f"token exchange failed: {e}") from e

        if not res.content:
            data = {}
        else:
            try:
                data = json.loads(res.content)
            except ValueError as e:
                raise UpstreamError(f"token endpoint returned non-JSON body (status {res.status_code})") from e
        if not isinstance(data, dict):
            raise UpstreamError(f"token endpoint returned unexpected body (status {res.status_code})")

        data = dict(data)
        data.pop('access_token', None)
        if 'id_token' in data:
            data['access_token'] = data['id_token']

        if res.status_code >= 400:
            log.warning(f"token exchange got {res.status_code}: {data.get('error')}")
        return res.status_code, data

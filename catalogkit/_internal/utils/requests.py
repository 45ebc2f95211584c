import typing as t
from collections.abc import MutableMapping

import requests

from catalogkit._internal.logging import log_debug
from catalogkit.exceptions import ClientError

CONNECTION_TIMEOUT = 10


def check_resp(
    resp: requests.Response,
    url: str,
    exc_type: t.Type[ClientError],
    err_msg_prefix: t.Optional[str] = None,
):
    if not resp.ok:
        raise exc_type(
            url=url,
            status_code=resp.status_code,
            reason=resp.reason,
            detail=resp.text,
            msg_prefix=err_msg_prefix,
        )


def log_request(
    url: str,
    method: str,
    data: t.Any = None,
    headers: t.Optional[t.Union[t.Dict, MutableMapping]] = None,
):
    msg = f"{method} {url}"
    if headers:
        msg += "\nHeaders: " + str(headers)
    if data:
        msg += "\nData: " + str(data)
    log_debug(msg, pretty=False)

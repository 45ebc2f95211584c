import json
import typing as t
from uuid import UUID

import requests
from furl import furl

from catalogkit import exceptions
from catalogkit._internal.configs import CatalogClientConfig
from catalogkit._internal.constants import MANAGEMENT_API_BASE
from catalogkit._internal.marshaler import Marshaler, RecordInstance
from catalogkit._internal.registry import DescriptorRegistry
from catalogkit._internal.utils.requests import CONNECTION_TIMEOUT, check_resp, log_request

IdLike = t.Union[str, UUID]


class CatalogAPIClient:
    """
    Client of the catalog management API.

    Request and response bodies are record instances (dicts keyed by logical field
    names). The marshaler converts them to and from the wire format using the
    descriptors of ``registry``.
    """

    def __init__(
        self,
        base_url: str,
        access_token: t.Optional[str] = None,
        registry: t.Optional[DescriptorRegistry] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.marshaler = Marshaler(registry)
        self.sess = requests.Session()
        self.sess.headers.update({"Content-Type": "application/json"})

        if access_token:
            self._set_auth_header(access_token)

    @classmethod
    def from_config(
        cls, config: CatalogClientConfig, registry: t.Optional[DescriptorRegistry] = None
    ) -> "CatalogAPIClient":
        return cls(config.base_url, access_token=config.access_token, registry=registry)

    def search_user(self, search: str) -> RecordInstance:
        url = self._build_url("search", "user")
        data = self._dump({"search": search}, "SearchUserRequest")
        log_request(url=url, method="POST", data=data)
        resp = self.sess.post(url, data=data, timeout=CONNECTION_TIMEOUT)
        _check_resp(resp, url, f"Failed to search users matching '{search}'")
        return self.marshaler.deserialize(resp.json(), "SearchUserResponse")

    def get_namespace_assignments(self, namespace_id: IdLike) -> RecordInstance:
        url = self._build_url("permissions", "namespace", str(namespace_id), "assignments")
        log_request(url=url, method="GET")
        resp = self.sess.get(url, timeout=CONNECTION_TIMEOUT)
        _check_resp(resp, url, f"Failed to fetch assignments of namespace '{namespace_id}'")
        return self.marshaler.deserialize(resp.json(), "GetNamespaceAssignmentsResponse")

    def update_namespace_assignments(
        self, namespace_id: IdLike, request: t.Mapping[str, t.Any]
    ) -> None:
        url = self._build_url("permissions", "namespace", str(namespace_id), "assignments")
        data = self._dump(request, "UpdateNamespaceAssignmentsRequest")
        log_request(url=url, method="POST", data=data)
        resp = self.sess.post(url, data=data, timeout=CONNECTION_TIMEOUT)
        _check_resp(resp, url, f"Failed to update assignments of namespace '{namespace_id}'")

    def _dump(self, instance: t.Mapping[str, t.Any], record_name: str) -> str:
        return json.dumps(self.marshaler.serialize(instance, record_name))

    def _build_url(self, *segments: str) -> str:
        f = furl(self.base_url)
        f.path.segments += MANAGEMENT_API_BASE.split("/") + list(segments)
        return f.url

    def _set_auth_header(self, access_token: str):
        self.sess.headers.update(Authorization="Bearer " + access_token)


def _check_resp(resp: requests.Response, url: str, err_msg_prefix: t.Optional[str] = None):
    check_resp(
        resp=resp, url=url, exc_type=exceptions.CatalogClientError, err_msg_prefix=err_msg_prefix
    )

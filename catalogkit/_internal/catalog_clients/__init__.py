# flake8: noqa
from .api_client import CatalogAPIClient

# Infrastructure clients
from clients.vault_client import (
    VaultClient,
    VaultError,
    get_marketplace_api_config,
)
from clients.marketplace_client import MarketplaceClient, MarketplaceApiError

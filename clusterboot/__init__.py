from clusterboot.discovery import (
    CLUSTER_INFO_NAME,
    KUBECONFIG_KEY,
    PUBLIC_NAMESPACE,
    publish_or_update,
)
from clusterboot.tokens import (
    BootstrapToken,
    InvalidTokenError,
    encode_token_secret_data,
    generate_token,
    parse_token,
    update_or_create_token,
)

__all__ = [
    "BootstrapToken",
    "CLUSTER_INFO_NAME",
    "InvalidTokenError",
    "KUBECONFIG_KEY",
    "PUBLIC_NAMESPACE",
    "encode_token_secret_data",
    "generate_token",
    "parse_token",
    "publish_or_update",
    "update_or_create_token",
]

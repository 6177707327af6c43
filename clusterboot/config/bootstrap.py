from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    SettingsConfigDict,
)


class BootstrapConfig(BaseSettings):
    """Configuration for token creation and cluster-info publishing."""

    model_config = SettingsConfigDict(env_prefix="CLUSTERBOOT_BOOTSTRAP_")

    kubeconfig_path: str = Field(
        default="/etc/kubernetes/admin.conf",
        description="Client configuration published into the cluster-info record",
    )

    publish_on_startup: bool = Field(
        default=False,
        description="Publish cluster-info when the server starts",
    )

    token_ttl_hours: int = Field(
        default=24,
        ge=0,
        description="Lifetime of newly created tokens in hours (0 for no expiration)",
    )

    token_usages: list[str] = Field(
        default=["bootstrap-signing", "bootstrap-authentication"],
        description="Usages granted to newly created tokens",
    )

    token_groups: list[str] = Field(
        default=["system:bootstrappers:kubeadm:default-node-token"],
        description="Extra groups newly created tokens authenticate as",
    )

    token_description: str = Field(
        default="",
        description="Description attached to newly created tokens",
    )

"""Department model."""

from pydantic import BaseModel, ConfigDict


class Department(BaseModel):
    """An organizational unit offering services, selectable by the user."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    description: str
    logo: str | None = None  # relative path under the asset base URL

    @property
    def has_description(self) -> bool:
        return bool(self.description)

    def logo_url(self, asset_base_url: str) -> str | None:
        """Resolve the logo against the asset base URL."""
        if not self.logo:
            return None
        return f"{asset_base_url.rstrip('/')}/{self.logo.lstrip('/')}"

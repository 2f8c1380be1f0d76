"""CORS configuration."""

from pydantic import BaseModel


class CorsConfig(BaseModel, frozen=True):
    """Allowed browser origins."""

    allowed_origins: str

    @property
    def allowed_origins_list(self) -> list[str]:
        """Get allowed origins as a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

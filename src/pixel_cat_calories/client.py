"""HTTP client for the Pixel Cat Calories API with a profile cache."""

from dataclasses import dataclass, field
from uuid import UUID

import httpx

from pixel_cat_calories.services.cache import Cache, InMemoryCache

PROFILE_CACHE_KEY = "profile"


@dataclass
class PixelCatClient:
    """Async API client mirroring the server's profile view.

    The cached profile is only ever replaced by a fresh ``GET`` of the
    profile endpoint. Every mutation invalidates it and refetches, so the
    server stays authoritative.
    """

    base_url: str
    http_client: httpx.AsyncClient
    cache: Cache = field(default_factory=InMemoryCache)
    token: str | None = None
    profile_ttl_seconds: int = 300
    # Used by requests that may wait on companion art generation.
    generation_timeout_seconds: float = 120

    @classmethod
    def create(cls, base_url: str, token: str | None = None) -> "PixelCatClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            token=token,
        )

    async def register(self, email: str, password: str) -> dict[str, object]:
        """Create an account."""
        return await self._request(
            "POST", "/api/auth/register", json={"email": email, "password": password}
        )

    async def login(self, email: str, password: str) -> str:
        """Log in and keep the session token for later calls."""
        payload = await self._request(
            "POST", "/api/auth/login", json={"email": email, "password": password}
        )
        self.token = str(payload["access_token"])
        self.cache.invalidate(PROFILE_CACHE_KEY)
        return self.token

    async def get_profile(self, *, refresh: bool = False) -> dict[str, object]:
        """Return the cached profile view, fetching it when missing or stale."""
        if not refresh:
            cached = self.cache.get(PROFILE_CACHE_KEY)
            if isinstance(cached, dict):
                return cached
        profile = await self._request("GET", "/api/user/profile")
        self.cache.set(PROFILE_CACHE_KEY, profile, ttl_seconds=self.profile_ttl_seconds)
        return profile

    async def onboard(  # noqa: PLR0913
        self,
        *,
        name: str,
        age: int,
        gender: str,
        height_cm: float,
        weight_kg: float,
        goals: list[str],
    ) -> dict[str, object]:
        """Submit onboarding data."""
        response = await self._request(
            "POST",
            "/api/user/onboard",
            json={
                "name": name,
                "age": age,
                "gender": gender,
                "height_cm": height_cm,
                "weight_kg": weight_kg,
                "goals": goals,
            },
            timeout=self.generation_timeout_seconds,
        )
        await self._refetch_profile()
        return response

    async def update_stats(
        self, weight_kg: float, goals: list[str]
    ) -> dict[str, object]:
        """Update weight and goals."""
        response = await self._request(
            "PUT",
            "/api/user/profile/stats",
            json={"weight_kg": weight_kg, "goals": goals},
            timeout=self.generation_timeout_seconds,
        )
        await self._refetch_profile()
        return response

    async def set_active_companion(self, companion_id: UUID) -> dict[str, object]:
        """Change the displayed companion."""
        response = await self._request(
            "PUT",
            "/api/user/profile",
            json={"active_companion_id": str(companion_id)},
        )
        await self._refetch_profile()
        return response

    async def upload_food(
        self,
        image_bytes: bytes,
        filename: str = "meal.jpg",
        content_type: str = "image/jpeg",
    ) -> dict[str, object]:
        """Upload a meal photo; the response lists any newly unlocked companions."""
        response = await self._request(
            "POST",
            "/api/food/upload",
            files={"foodImage": (filename, image_bytes, content_type)},
            timeout=self.generation_timeout_seconds,
        )
        await self._refetch_profile()
        return response

    async def list_companions(self) -> list[dict[str, object]]:
        """Return the companion collection."""
        payload = await self._request("GET", "/api/companions")
        return list(payload.get("companions", []))

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _refetch_profile(self) -> None:
        self.cache.invalidate(PROFILE_CACHE_KEY)
        await self.get_profile(refresh=True)

    async def _request(
        self, method: str, path: str, timeout: float = 30, **kwargs: object
    ) -> dict[str, object]:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        response = await self.http_client.request(
            method,
            f"{self.base_url}{path}",
            headers=headers,
            timeout=timeout,
            **kwargs,
        )
        response.raise_for_status()
        return response.json()

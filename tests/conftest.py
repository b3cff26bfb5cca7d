"""Shared test fixtures."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from pixel_cat_calories.config import Settings
from pixel_cat_calories.containers import AppContainer
from pixel_cat_calories.domain.models import (
    AccountRecord,
    BmiCategory,
    Companion,
    FoodItem,
    FoodLogEntry,
    Gender,
    Profile,
    UnlockCriteria,
)
from pixel_cat_calories.services.accounts import AccountRepository, AccountService
from pixel_cat_calories.services.assets import AssetGenerator, CompanionArtService
from pixel_cat_calories.services.food_log import (
    FoodLogRepository,
    FoodLogService,
    ImageStorage,
)
from pixel_cat_calories.services.profiles import ProfileRepository, ProfileService
from pixel_cat_calories.services.unlocks import CompanionRepository, UnlockService
from pixel_cat_calories.services.vision import FoodRecognitionService, VisionClient

JWT_SECRET = "test-jwt-secret-that-is-long-enough-for-hs256"


def make_profile(**overrides: object) -> Profile:
    """Build an onboarded-looking profile with sensible defaults."""
    values: dict[str, object] = {
        "id": uuid4(),
        "name": "Mochi",
        "age": 30,
        "gender": Gender.FEMALE,
        "height_cm": 170.0,
        "weight_kg": 63.58,
        "bmi": 22.0,
    }
    values.update(overrides)
    return Profile(**values)  # type: ignore[arg-type]


def make_companion(
    name: str,
    *,
    total_calories: float | None = None,
    goals: Iterable[str] = (),
    bmi_target: BmiCategory | None = None,
    is_default: bool = False,
    asset_url: str | None = None,
) -> Companion:
    """Build a catalog companion."""
    return Companion(
        id=uuid4(),
        name=name,
        is_default=is_default,
        unlock_criteria=UnlockCriteria(
            total_calories=total_calories,
            goal_match=frozenset(goals),
            bmi_target=bmi_target,
        ),
        asset_url=asset_url,
        generation_prompt=f"8-bit pixel art, {name.lower()}",
    )


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[UUID, Profile] = field(default_factory=dict)
    saves: list[tuple[Profile, list[UUID]]] = field(default_factory=list)
    resets: list[tuple[UUID, datetime]] = field(default_factory=list)

    def add(self, profile: Profile) -> Profile:
        self.profiles[profile.id] = profile
        return profile

    def get_profile(self, profile_id: UUID) -> Profile | None:
        return self.profiles.get(profile_id)

    def save_profile(
        self, profile: Profile, new_companion_ids: Sequence[UUID] = ()
    ) -> None:
        self.profiles[profile.id] = profile
        self.saves.append((profile, list(new_companion_ids)))

    def reset_daily_calories(self, profile_id: UUID, now: datetime) -> None:
        self.resets.append((profile_id, now))
        stored = self.profiles[profile_id]
        written = stored.calories_updated_at
        today = now.astimezone(UTC).date()
        if written is None or written.astimezone(UTC).date() >= today:
            return
        self.profiles[profile_id] = replace(
            stored, current_calories_today=0.0, calories_updated_at=now
        )


@dataclass
class InMemoryCompanionRepository(CompanionRepository):
    """In-memory companion catalog for tests."""

    companions: dict[UUID, Companion] = field(default_factory=dict)
    asset_updates: list[tuple[UUID, str]] = field(default_factory=list)
    deleted: list[UUID] = field(default_factory=list)

    def add(self, *companions: Companion) -> None:
        for companion in companions:
            self.companions[companion.id] = companion

    def list_catalog(self) -> list[Companion]:
        return [c for c in self.companions.values() if not c.is_default]

    def get_companions(self, companion_ids: Iterable[UUID]) -> list[Companion]:
        return [
            self.companions[companion_id]
            for companion_id in companion_ids
            if companion_id in self.companions
        ]

    def create_companion(self, companion: Companion) -> Companion:
        self.companions[companion.id] = companion
        return companion

    def update_asset(self, companion_id: UUID, asset_url: str) -> None:
        self.asset_updates.append((companion_id, asset_url))
        current = self.companions[companion_id]
        self.companions[companion_id] = Companion(
            id=current.id,
            name=current.name,
            is_default=current.is_default,
            unlock_criteria=current.unlock_criteria,
            asset_url=asset_url,
            generation_prompt=current.generation_prompt,
            body_type=current.body_type,
        )

    def delete_companion(self, companion_id: UUID) -> None:
        self.deleted.append(companion_id)
        self.companions.pop(companion_id, None)


@dataclass
class InMemoryAccountRepository(AccountRepository):
    """In-memory account repository for tests."""

    accounts: dict[str, AccountRecord] = field(default_factory=dict)
    profile_repository: InMemoryProfileRepository | None = None

    def get_by_email(self, email: str) -> AccountRecord | None:
        return self.accounts.get(email)

    def create_account(self, email: str, password_hash: str) -> AccountRecord:
        account = AccountRecord(id=uuid4(), email=email, password_hash=password_hash)
        self.accounts[email] = account
        if self.profile_repository is not None:
            self.profile_repository.add(Profile(id=account.id))
        return account


@dataclass
class InMemoryFoodLogRepository(FoodLogRepository):
    """In-memory food log repository for tests."""

    entries: list[FoodLogEntry] = field(default_factory=list)

    def create_entry(  # noqa: PLR0913
        self,
        profile_id: UUID,
        logged_at: datetime,
        image_url: str,
        detected_foods: list[FoodItem],
        total_calories: float,
    ) -> FoodLogEntry:
        entry = FoodLogEntry(
            id=uuid4(),
            profile_id=profile_id,
            logged_at=logged_at,
            image_url=image_url,
            detected_foods=tuple(detected_foods),
            total_calories=total_calories,
        )
        self.entries.append(entry)
        return entry

    def list_entries(self, profile_id: UUID, limit: int) -> list[FoodLogEntry]:
        matching = [e for e in self.entries if e.profile_id == profile_id]
        return sorted(matching, key=lambda e: e.logged_at, reverse=True)[:limit]


@dataclass
class InMemoryImageStorage(ImageStorage):
    """In-memory image storage for tests."""

    objects: dict[str, tuple[bytes, str]] = field(default_factory=dict)

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        self.objects[path] = (content, content_type)
        return f"https://storage.test/{path}"


@dataclass
class FakeAssetGenerator(AssetGenerator):
    """Fake art generator that records prompts."""

    fail: bool = False
    static_prompts: list[str] = field(default_factory=list)
    motion_prompts: list[str] = field(default_factory=list)

    async def generate_static(self, prompt: str) -> str:
        self.static_prompts.append(prompt)
        if self.fail:
            raise RuntimeError("image model unavailable")
        return f"https://assets.test/image-{len(self.static_prompts)}.png"

    async def animate(self, image_url: str, motion_prompt: str) -> str:
        self.motion_prompts.append(motion_prompt)
        return image_url.replace("image-", "video-").replace(".png", ".mp4")


@dataclass
class FakeVisionClient(VisionClient):
    """Fake vision client returning a fixed payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "detected_foods": [
                {
                    "name": "Burger",
                    "calories": 350,
                    "protein": 20,
                    "carbs": 30,
                    "fat": 15,
                },
                {
                    "name": "Apple",
                    "calories": 95,
                    "protein": 0.5,
                    "carbs": 25,
                    "fat": 0.3,
                },
            ]
        }
    )
    prompts: list[str] = field(default_factory=list)

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        self.prompts.append(prompt)
        return self.payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJlLWZvci10ZXN0cw"
        ),
        jwt_secret=JWT_SECRET,
        openai_api_key="openai-key",
        replicate_api_token="replicate-token",
        environment="test",
    )


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def companion_repository() -> InMemoryCompanionRepository:
    return InMemoryCompanionRepository()


@pytest.fixture
def asset_generator() -> FakeAssetGenerator:
    return FakeAssetGenerator()


@pytest.fixture
def unlock_service(
    companion_repository: InMemoryCompanionRepository,
    asset_generator: FakeAssetGenerator,
) -> UnlockService:
    return UnlockService(
        repository=companion_repository,
        art_service=CompanionArtService(generator=asset_generator),
    )


@pytest.fixture
def profile_service(
    profile_repository: InMemoryProfileRepository,
    companion_repository: InMemoryCompanionRepository,
    unlock_service: UnlockService,
) -> ProfileService:
    return ProfileService(
        repository=profile_repository,
        companion_repository=companion_repository,
        unlock_service=unlock_service,
        art_service=unlock_service.art_service,
        fallback_asset_url="/cats/cat-normal.png",
    )


@pytest.fixture
def food_log_service(profile_service: ProfileService) -> FoodLogService:
    return FoodLogService(
        repository=InMemoryFoodLogRepository(),
        storage=InMemoryImageStorage(),
        recognition_service=FoodRecognitionService(
            client=FakeVisionClient(),
            model="gpt-5.2",
            reasoning_effort="low",
            store=False,
        ),
        profile_service=profile_service,
    )


@pytest.fixture
def container(
    settings: Settings,
    profile_repository: InMemoryProfileRepository,
    profile_service: ProfileService,
    food_log_service: FoodLogService,
) -> AppContainer:
    account_service = AccountService(
        repository=InMemoryAccountRepository(profile_repository=profile_repository),
        jwt_secret=settings.jwt_secret,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        account_service=account_service,
        profile_service=profile_service,
        food_log_service=food_log_service,
        close_resources=close_resources,
    )

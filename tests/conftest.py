from datetime import datetime, timezone
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.api.deps import get_container
from app.config import Settings
from app.core.exceptions import ErrorCode, NotFoundError, UpstreamServiceError
from app.core.security import create_access_token
from app.main import app
from app.models.match import Match, MatchStatus, Player
from app.schemas.compare import CompareResponse, UserComparison, Verdict
from app.schemas.github import GitHubSignals, ProfileSummary, RepoSummary
from app.schemas.roast import DeveloperProfile, RoastResult
from app.schemas.user import SessionUser
from app.services.container import ServiceContainer, build_container


def make_signals(username: str = "octocat", stars: int = 42) -> GitHubSignals:
    return GitHubSignals(
        profile=ProfileSummary(
            public_repos=12,
            followers=100,
            created_at="2015-01-01T00:00:00Z",
            bio=f"{username} writes code",
        ),
        top_repos=[
            RepoSummary(
                name=f"{username}-project",
                language="Python",
                stars=stars,
                forks=3,
                updated_at="2024-06-01T00:00:00Z",
                description="A project",
            )
        ],
    )


def make_roast(username: str = "octocat") -> RoastResult:
    return RoastResult(
        roast=f"{username} has more forks than commits.",
        advice=["Write tests", "Add READMEs", "Ship something"],
        profile=DeveloperProfile(
            archetype="The Experimentalist",
            strengths=["Curiosity"],
            blind_spots=["Documentation"],
        ),
    )


def make_compare_response(
    username1: str = "alice-gh",
    username2: str = "bob-gh",
    winner: str = "user1",
) -> CompareResponse:
    return CompareResponse(
        request_id="req-1",
        user1=UserComparison(
            username=username1, signals=make_signals(username1), roast=make_roast(username1)
        ),
        user2=UserComparison(
            username=username2, signals=make_signals(username2), roast=make_roast(username2)
        ),
        verdict=Verdict(winner=winner, reasoning="Closer call than it looks", score_user1=80, score_user2=65),
    )


class FakeGitHubService:
    def __init__(self):
        self.signal_calls: list[str] = []
        self.missing_users: set[str] = set()
        self.oauth_user = {"id": 4242, "login": "octocat", "avatar_url": "https://avatars/octocat"}
        self.oauth_codes: list[str] = []

    async def get_signals(self, username, max_repos=5, include_readme=False):
        self.signal_calls.append(username)
        if username.lower() in self.missing_users:
            raise NotFoundError("GitHub user not found", resource="github_user")
        return make_signals(username)

    async def exchange_oauth_code(self, client_id, client_secret, code, redirect_uri):
        self.oauth_codes.append(code)
        return "gho_exchanged"

    async def get_authenticated_user(self, access_token):
        return self.oauth_user

    async def aclose(self):
        pass


class FakeLLMService:
    def __init__(self):
        self.winner = "user1"
        self.fail_compare = False
        self.roast_calls: list[str] = []
        self.compare_calls: list[tuple[str, str, str]] = []

    async def generate_roast(self, signals, intensity):
        self.roast_calls.append(f"{signals.top_repos[0].name}:{intensity.value}")
        return make_roast()

    async def compare_users(self, user1, user2, language="en"):
        self.compare_calls.append((user1.username, user2.username, language))
        if self.fail_compare:
            raise UpstreamServiceError("OpenAI API error: boom", code=ErrorCode.LLM_ERROR)
        return Verdict(
            winner=self.winner,
            reasoning="Both are fine, one is finer",
            score_user1=70,
            score_user2=60,
        )

    async def translate(self, text, target_language):
        return f"[{target_language}] {text}"

    async def aclose(self):
        pass


class FakeTTSService:
    def __init__(self):
        self.requests: list[tuple[str, str, str | None]] = []

    async def synthesize(self, text, voice_id, model_id=None):
        self.requests.append((text, voice_id, model_id))
        return b"ID3-fake-mp3"

    async def aclose(self):
        pass


class MutableClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        RATE_LIMIT_REQUESTS=1000,
        PVP_ENABLE_TEST_ENDPOINTS=True,
    )


@pytest.fixture
def fake_github() -> FakeGitHubService:
    return FakeGitHubService()


@pytest.fixture
def fake_llm() -> FakeLLMService:
    return FakeLLMService()


@pytest.fixture
def fake_tts() -> FakeTTSService:
    return FakeTTSService()


@pytest.fixture
def clock() -> MutableClock:
    return MutableClock(datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def container(test_settings, fake_github, fake_llm, fake_tts, clock) -> ServiceContainer:
    return build_container(
        test_settings,
        github_service=fake_github,
        llm_service=fake_llm,
        tts_service=fake_tts,
        clock=clock,
    )


@pytest_asyncio.fixture(scope="function")
async def client(container: ServiceContainer) -> AsyncGenerator[AsyncClient, None]:
    original = app.state.container
    app.state.container = container
    app.dependency_overrides[get_container] = lambda: container

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
    app.state.container = original
    await container.task_runner.shutdown()


@pytest.fixture
def auth_headers() -> Callable[..., dict[str, str]]:
    def _headers(user_id: str, username: str = "someone") -> dict[str, str]:
        token = create_access_token(SessionUser(user_id=user_id, username=username))
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def alice(auth_headers) -> dict[str, str]:
    return auth_headers("1001", "alice")


@pytest.fixture
def bob(auth_headers) -> dict[str, str]:
    return auth_headers("1002", "bob")


@pytest.fixture
def carol(auth_headers) -> dict[str, str]:
    return auth_headers("1003", "carol")


@pytest.fixture
def signals() -> GitHubSignals:
    return make_signals()


@pytest.fixture
def roast() -> RoastResult:
    return make_roast()


@pytest.fixture
def compare_response() -> Callable[..., CompareResponse]:
    return make_compare_response


@pytest.fixture
def completed_match() -> Callable[..., Match]:
    """Builds a completed Match directly, bypassing the coordinator."""

    def _build(match_id: str, completed_at: datetime) -> Match:
        return Match(
            match_id=match_id,
            player1=Player(username="alice-gh", user_id="u1", ready=True),
            player2=Player(username="bob-gh", user_id="u2", ready=True),
            created_at=completed_at,
            status=MatchStatus.COMPLETED,
            result=make_compare_response(),
            started_at=completed_at,
            completed_at=completed_at,
        )

    return _build

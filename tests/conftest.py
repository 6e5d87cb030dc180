"""Shared fixtures: a throwaway SQLite database and a fake YouTube Data API."""

from typing import AsyncGenerator, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from perspectize.api.youtube import get_youtube_client
from perspectize.config import Settings
from perspectize.core.database import create_engine, create_session_factory, get_db, init_models
from perspectize.core.youtube import YouTubeClient
from perspectize.main import create_app

YOUTUBE_BASE_URL = "https://youtube.test/youtube/v3"


def make_video_item(
    video_id: str,
    title: str,
    duration: str = "PT5M0S",
    view_count: Optional[str] = "1234",
    like_count: Optional[str] = "56"
) -> Dict:
    return {
        "kind": "youtube#video",
        "id": video_id,
        "snippet": {
            "title": title,
            "description": f"Description of {title}",
            "channelTitle": "Test Channel",
            "publishedAt": "2026-01-15T12:00:00Z",
            "tags": ["test"]
        },
        "contentDetails": {"duration": duration},
        "statistics": {"viewCount": view_count, "likeCount": like_count}
    }


class FakeYouTubeAPI:
    """In-memory stand-in for the videos.list endpoint."""

    def __init__(self):
        self.videos: Dict[str, Dict] = {}
        self.failures: Dict[str, httpx.Response] = {}
        self.requests: List[httpx.Request] = []

    def add_video(self, video_id: str, title: str, **kwargs) -> Dict:
        item = make_video_item(video_id, title, **kwargs)
        self.videos[video_id] = item
        return item

    def fail(self, video_id: str, status_code: int, text: str = "upstream failure"):
        self.failures[video_id] = httpx.Response(status_code, text=text)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        video_id = request.url.params.get("id")

        if video_id in self.failures:
            return self.failures[video_id]

        items = [self.videos[video_id]] if video_id in self.videos else []
        return httpx.Response(
            200,
            json={"kind": "youtube#videoListResponse", "items": items}
        )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        app_env="test",
        debug=False,
        database_url=f"sqlite+aiosqlite:///{tmp_path}/perspectize.db",
        youtube_api_key="test-key",
        youtube_api_base_url=YOUTUBE_BASE_URL,
        youtube_max_retries=1
    )


@pytest_asyncio.fixture
async def engine(settings):
    engine = create_engine(settings)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_youtube() -> FakeYouTubeAPI:
    return FakeYouTubeAPI()


@pytest_asyncio.fixture
async def youtube_client(fake_youtube) -> AsyncGenerator[YouTubeClient, None]:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_youtube.handler))
    client = YouTubeClient(
        api_key="test-key",
        base_url=YOUTUBE_BASE_URL,
        max_retries=1,
        client=http_client
    )
    yield client
    await http_client.aclose()


@pytest.fixture
def app(settings, session_factory, youtube_client):
    app = create_app(settings)
    app.state.session_factory = session_factory

    async def override_get_db():
        async with session_factory() as session:
            yield session

    async def override_get_youtube_client():
        yield youtube_client

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_youtube_client] = override_get_youtube_client
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

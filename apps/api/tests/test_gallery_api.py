import io
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image

from config import settings
from content.errors import OversizedAsset
from main import app
from routers import rate_limit
from services.persistence import PersistenceService, get_persistence_service
from services.session_token import create_session_token


UPLOADER_ID = "uploader-1"
AUTH_HEADER = {
    "Authorization": f"Bearer {create_session_token(UPLOADER_ID, name='Dosen Videografi')['token']}"
}


@pytest_asyncio.fixture
async def gallery_client(local_store, remote_store):
    service = PersistenceService(local_store, remote=remote_store)
    app.dependency_overrides[get_persistence_service] = lambda: service
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client, service
    app.dependency_overrides.pop(get_persistence_service, None)


async def _publish(client, title="Jejak Pesisir", link="https://drive.google.com/file/d/ABC123/view"):
    resp = await client.post(
        "/videos/",
        json={"title": title, "source_link": link, "caption": "Dokumenter"},
        headers=AUTH_HEADER,
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


@pytest.mark.asyncio
async def test_publish_rate_comment_and_list(gallery_client):
    client, _ = gallery_client
    video = await _publish(client)

    assert video["embed_url"] == "https://drive.google.com/file/d/ABC123/preview"
    assert video["uploaded_by"]["id"] == UPLOADER_ID
    assert video["uploaded_by"]["name"] == "Dosen Videografi"

    for value in (5, 5, 4):
        resp = await client.post(f"/videos/{video['id']}/ratings", json={"value": value})
        assert resp.status_code == 200
    comment_resp = await client.post(
        f"/videos/{video['id']}/comments",
        json={"text": "Visualnya keren", "reaction": "🔥"},
    )
    assert comment_resp.status_code == 200
    assert comment_resp.json()["author"] == "Anonymous"
    assert (await client.post(f"/videos/{video['id']}/views")).status_code == 200
    assert (await client.post(f"/videos/{video['id']}/shares")).status_code == 200

    listing = (await client.get("/videos/")).json()
    assert len(listing) == 1
    stored = listing[0]
    assert stored["ratings"] == [5, 5, 4]
    assert stored["average_rating"] == 4.7
    assert stored["comments"][0]["text"] == "Visualnya keren"
    assert (stored["view_count"], stored["share_count"]) == (1, 1)

    single = await client.get(f"/videos/{video['id']}")
    assert single.status_code == 200
    assert (await client.get("/videos/missing")).status_code == 404


@pytest.mark.asyncio
async def test_publish_requires_session_and_recognized_link(gallery_client):
    client, _ = gallery_client
    body = {"title": "x", "source_link": "https://youtu.be/abc"}

    assert (await client.post("/videos/", json=body)).status_code == 401
    bad = await client.post(
        "/videos/",
        json={"title": "x", "source_link": "not-a-url"},
        headers=AUTH_HEADER,
    )
    assert bad.status_code == 422
    assert (
        await client.post("/videos/", json=body, headers={"Authorization": "Bearer nope"})
    ).status_code == 401


@pytest.mark.asyncio
async def test_patch_keeps_interactions_and_rederives_embed_url(gallery_client):
    client, _ = gallery_client
    video = await _publish(client)
    await client.post(f"/videos/{video['id']}/ratings", json={"value": 3})
    await client.post(f"/videos/{video['id']}/views")

    resp = await client.patch(
        f"/videos/{video['id']}",
        json={
            "title": "Judul Baru",
            "source_link": "https://www.youtube.com/watch?v=XYZ",
            "ratings": [],
            "comments": [],
            "view_count": 0,
        },
        headers=AUTH_HEADER,
    )
    assert resp.status_code == 200

    stored = (await client.get(f"/videos/{video['id']}")).json()
    assert stored["title"] == "Judul Baru"
    assert stored["embed_url"] == "https://www.youtube.com/embed/XYZ"
    assert stored["ratings"] == [3]
    assert stored["view_count"] == 1


@pytest.mark.asyncio
async def test_interactions_on_unknown_video_return_404(gallery_client):
    client, _ = gallery_client
    assert (await client.post("/videos/missing/ratings", json={"value": 5})).status_code == 404
    assert (await client.post("/videos/missing/views")).status_code == 404
    assert (
        await client.patch("/videos/missing", json={"title": "x"}, headers=AUTH_HEADER)
    ).status_code == 404
    assert (await client.post("/videos/missing/ratings", json={"value": 9})).status_code == 422


@pytest.mark.asyncio
async def test_reset_statistics_and_stats_endpoint(gallery_client):
    client, _ = gallery_client
    first = await _publish(client, title="A")
    second = await _publish(client, title="B", link="https://youtu.be/second")
    await client.post(f"/videos/{first['id']}/comments", json={"text": "satu"})
    await client.post(f"/videos/{second['id']}/views")
    await client.post(f"/videos/{second['id']}/views")

    stats = (await client.get("/videos/stats")).json()
    assert stats["summary"]["total_views"] == 2
    assert stats["most_engaged"][0]["id"] == first["id"]
    assert stats["most_viewed"][0]["id"] == second["id"]

    assert (await client.post("/admin/reset-statistics")).status_code == 401
    for _ in range(2):
        resp = await client.post("/admin/reset-statistics", headers=AUTH_HEADER)
        assert resp.status_code == 200
        assert resp.json()["video_count"] == 2

    for video in (await client.get("/videos/")).json():
        assert video["ratings"] == [] and video["comments"] == []
        assert video["view_count"] == 0 and video["share_count"] == 0
        assert video["average_rating"] == 0


@pytest.mark.asyncio
async def test_delete_video(gallery_client):
    client, _ = gallery_client
    video = await _publish(client)
    resp = await client.delete(f"/videos/{video['id']}", headers=AUTH_HEADER)
    assert resp.status_code == 200
    assert (await client.get("/videos/")).json() == []


@pytest.mark.asyncio
async def test_remote_write_failure_is_reported_to_client(gallery_client):
    client, service = gallery_client
    service.remote = AsyncMock()
    service.remote.name = "remote"
    service.remote.create_video.side_effect = OversizedAsset(1_000_000, 950_000)

    resp = await client.post(
        "/videos/",
        json={"title": "x", "source_link": "https://youtu.be/abc"},
        headers=AUTH_HEADER,
    )
    assert resp.status_code == 413
    assert "too large" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_thumbnail_upload_is_compressed(gallery_client):
    client, _ = gallery_client
    buffer = io.BytesIO()
    Image.new("RGB", (1200, 600), (10, 20, 30)).save(buffer, format="PNG")

    resp = await client.post(
        "/media/thumbnail",
        files={"file": ("thumb.png", buffer.getvalue(), "image/png")},
        headers=AUTH_HEADER,
    )
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["thumbnail"].startswith("data:image/jpeg;base64,")
    assert payload["size"] == len(payload["thumbnail"])

    corrupt = await client.post(
        "/media/thumbnail",
        files={"file": ("thumb.png", b"garbage", "image/png")},
        headers=AUTH_HEADER,
    )
    assert corrupt.status_code == 422


@pytest.mark.asyncio
async def test_normalize_link_preview(gallery_client):
    client, _ = gallery_client
    ok = (await client.get("/media/normalize-link", params={"url": "https://youtu.be/XYZ"})).json()
    assert ok == {"url": "https://youtu.be/XYZ", "embed_url": "https://www.youtube.com/embed/XYZ", "valid": True}
    bad = (await client.get("/media/normalize-link", params={"url": "not-a-url"})).json()
    assert bad["embed_url"] is None and bad["valid"] is False


@pytest.mark.asyncio
async def test_lecturers_and_about_endpoints(gallery_client):
    client, _ = gallery_client
    created = await client.post(
        "/lecturers/",
        json={"name": "Dr. Sari", "nip": "1980", "bio": "Dokumenter", "photo_url": "data:image/jpeg;base64,AA"},
        headers=AUTH_HEADER,
    )
    assert created.status_code == 200
    lecturer_id = created.json()["id"]

    replaced = await client.put(
        f"/lecturers/{lecturer_id}",
        json={"name": "Dr. Sari W.", "photo_url": "data:image/jpeg;base64,AA"},
        headers=AUTH_HEADER,
    )
    assert replaced.status_code == 200
    listing = (await client.get("/lecturers/")).json()
    assert [(l["name"], l["bio"]) for l in listing] == [("Dr. Sari W.", "")]

    assert (await client.delete(f"/lecturers/{lecturer_id}", headers=AUTH_HEADER)).status_code == 200
    assert (await client.get("/lecturers/")).json() == []

    saved = await client.put("/about/", json={"title": "Tentang", "body": "Arsip"}, headers=AUTH_HEADER)
    assert saved.status_code == 200
    assert (await client.get("/about/")).json()["title"] == "Tentang"


@pytest.mark.asyncio
async def test_health_reports_backend(gallery_client):
    client, _ = gallery_client
    resp = await client.get("/health")
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["backend"] == "remote"
    assert payload["remote_store"] == "up"


@pytest.mark.asyncio
async def test_rotating_forwarded_header_does_not_bypass_rating_limit(gallery_client, monkeypatch):
    client, _ = gallery_client
    video = await _publish(client)
    app.state.disable_rate_limits = False
    monkeypatch.setattr(rate_limit, "_consume_redis_quota", AsyncMock(side_effect=ConnectionError("down")))

    statuses = []
    for i in range(15):
        resp = await client.post(
            f"/videos/{video['id']}/ratings",
            json={"value": 5},
            headers={"x-forwarded-for": f"10.0.0.{i}"},
        )
        statuses.append(resp.status_code)

    assert statuses == [200] * 10 + [429] * 5


@pytest.mark.asyncio
async def test_admin_login_issues_usable_session_token(gallery_client, monkeypatch):
    client, _ = gallery_client
    credentials = {"username": "superadmin", "password": "s3cret-pass"}
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "")

    assert (await client.post("/auth/login", json=credentials)).status_code == 503

    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "s3cret-pass")
    wrong = await client.post("/auth/login", json={**credentials, "password": "nope"})
    assert wrong.status_code == 401

    resp = await client.post("/auth/login", json=credentials)
    assert resp.status_code == 200
    token = resp.json()["session_token"]
    headers = {"Authorization": f"Bearer {token}"}

    me = (await client.get("/auth/me", headers=headers)).json()
    assert me["user_id"] == "superadmin"

    created = await client.post(
        "/videos/",
        json={"title": "x", "source_link": "https://youtu.be/abc"},
        headers=headers,
    )
    assert created.status_code == 200
    uploader = created.json()["uploaded_by"]
    assert (uploader["id"], uploader["name"]) == ("superadmin", "Gallery Admin")

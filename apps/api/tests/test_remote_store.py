import asyncio

import pytest
from sqlalchemy import func, select

from content.errors import OversizedAsset, RecordNotFound, RemoteUnavailable
from content.models import AboutContent, Comment, LecturerRecord, NewVideoRecord, Uploader, VideoMetadataPatch
from models.video import Video
from services.remote_store import RemoteContentStore


def _new_video(title: str, created_at: int, **extra) -> NewVideoRecord:
    return NewVideoRecord(
        title=title,
        source_link="https://youtu.be/LXb3EKWsInQ",
        embed_url="https://www.youtube.com/embed/LXb3EKWsInQ",
        caption="Dokumenter pendek",
        created_at=created_at,
        **extra,
    )


async def _get(store, video_id):
    return {v.id: v for v in await store.list_videos()}[video_id]


@pytest.mark.asyncio
async def test_create_assigns_store_id_and_lists_newest_first(remote_store):
    older = await remote_store.create_video(_new_video("older", 1000))
    newer = await remote_store.create_video(
        _new_video("newer", 2000, uploaded_by=Uploader(id="u1", name="Ana"))
    )

    videos = await remote_store.list_videos()
    assert [v.id for v in videos] == [newer.id, older.id]
    assert videos[0].uploaded_by == Uploader(id="u1", name="Ana")
    assert videos[1].uploaded_by is None
    assert videos[0].ratings == [] and videos[0].comments == []


@pytest.mark.asyncio
async def test_concurrent_rating_appends_all_survive(remote_store):
    video = await remote_store.create_video(_new_video("rated", 1))
    values = [5, 4, 3, 5, 1, 2, 5, 4]

    await asyncio.gather(*(remote_store.append_rating(video.id, value) for value in values))

    stored = await _get(remote_store, video.id)
    assert sorted(stored.ratings) == sorted(values)


@pytest.mark.asyncio
async def test_appends_keep_prior_elements_in_order(remote_store):
    video = await remote_store.create_video(_new_video("ordered", 1))
    await remote_store.append_rating(video.id, 5)
    await remote_store.append_rating(video.id, 5)
    first = Comment(text="Pertama", author="A", created_at=10)
    second = Comment(text="Kedua", created_at=20, reaction="🔥")
    await remote_store.append_comment(video.id, first)
    before = await _get(remote_store, video.id)

    await remote_store.append_rating(video.id, 4)
    await remote_store.append_comment(video.id, second)

    after = await _get(remote_store, video.id)
    assert after.ratings == before.ratings + [4] == [5, 5, 4]
    assert after.comments == [first, second]


@pytest.mark.asyncio
async def test_concurrent_counter_increments(remote_store):
    video = await remote_store.create_video(_new_video("counted", 1))

    await asyncio.gather(*(remote_store.increment_view(video.id) for _ in range(6)))
    await asyncio.gather(*(remote_store.increment_share(video.id) for _ in range(3)))

    stored = await _get(remote_store, video.id)
    assert (stored.view_count, stored.share_count) == (6, 3)


@pytest.mark.asyncio
async def test_update_never_touches_interaction_fields(remote_store):
    video = await remote_store.create_video(_new_video("before", 1))
    await remote_store.append_rating(video.id, 5)
    await remote_store.append_comment(video.id, Comment(text="Bagus"))
    await remote_store.increment_view(video.id)

    patch = VideoMetadataPatch.model_validate(
        {
            "title": "after",
            "caption": None,
            "ratings": [],
            "comments": [],
            "view_count": 0,
            "share_count": 50,
            "created_at": 5,
        }
    )
    await remote_store.update_video(video.id, patch)

    stored = await _get(remote_store, video.id)
    assert stored.title == "after"
    assert stored.caption == "Dokumenter pendek"
    assert stored.created_at == 1
    assert stored.ratings == [5]
    assert len(stored.comments) == 1
    assert (stored.view_count, stored.share_count) == (1, 0)


@pytest.mark.asyncio
async def test_missing_video_mutations_raise_not_found(remote_store):
    with pytest.raises(RecordNotFound):
        await remote_store.update_video("missing", VideoMetadataPatch(title="x"))
    with pytest.raises(RecordNotFound):
        await remote_store.update_video("missing", VideoMetadataPatch())
    with pytest.raises(RecordNotFound):
        await remote_store.append_rating("missing", 5)
    with pytest.raises(RecordNotFound):
        await remote_store.append_comment("missing", Comment(text="x"))
    with pytest.raises(RecordNotFound):
        await remote_store.increment_view("missing")


@pytest.mark.asyncio
async def test_oversized_thumbnail_rejected_before_any_statement(remote_store):
    small = RemoteContentStore(remote_store._session_maker, max_embedded_chars=10)

    with pytest.raises(OversizedAsset):
        await small.create_video(_new_video("big", 1, thumbnail="x" * 11))

    async with remote_store._session_maker() as session:
        assert await session.scalar(select(func.count()).select_from(Video)) == 0


@pytest.mark.asyncio
async def test_reset_all_clears_everything_and_is_idempotent(remote_store):
    a = await remote_store.create_video(_new_video("a", 1))
    b = await remote_store.create_video(_new_video("b", 2))
    for video_id in (a.id, b.id):
        await remote_store.append_rating(video_id, 4)
        await remote_store.append_comment(video_id, Comment(text="hi"))
        await remote_store.increment_view(video_id)
        await remote_store.increment_share(video_id)

    assert await remote_store.reset_all() == 2
    once = await remote_store.list_videos()
    assert await remote_store.reset_all() == 2
    twice = await remote_store.list_videos()

    assert once == twice
    assert [v.title for v in twice] == ["b", "a"]
    for video in twice:
        assert video.ratings == [] and video.comments == []
        assert video.view_count == 0 and video.share_count == 0


@pytest.mark.asyncio
async def test_delete_removes_video_and_children(remote_store):
    video = await remote_store.create_video(_new_video("gone", 1))
    await remote_store.append_rating(video.id, 3)

    await remote_store.delete_video(video.id)

    assert await remote_store.list_videos() == []
    keeper = await remote_store.create_video(_new_video("keeper", 2))
    assert (await _get(remote_store, keeper.id)).ratings == []


@pytest.mark.asyncio
async def test_lecturer_crud_and_about_singleton(remote_store):
    created = await remote_store.create_lecturer(
        LecturerRecord(id="client-id", name="Dr. Sari", nip="1980", photo_url="data:image/jpeg;base64,AA")
    )
    assert created.id != "client-id"

    await remote_store.update_lecturer(created.model_copy(update={"name": "Dr. Sari W."}))
    assert [(l.id, l.name) for l in await remote_store.list_lecturers()] == [(created.id, "Dr. Sari W.")]

    with pytest.raises(RecordNotFound):
        await remote_store.update_lecturer(LecturerRecord(id="missing", name="x"))

    await remote_store.delete_lecturer(created.id)
    assert await remote_store.list_lecturers() == []

    assert (await remote_store.get_about()).title == AboutContent().title
    await remote_store.save_about(AboutContent(title="Tentang", body="Arsip", contact_email="a@b.id", updated_at=7))
    await remote_store.save_about(AboutContent(title="Tentang Kami", body="Arsip", updated_at=8))
    about = await remote_store.get_about()
    assert (about.title, about.contact_email, about.updated_at) == ("Tentang Kami", None, 8)


@pytest.mark.asyncio
async def test_driver_failures_surface_as_remote_unavailable(tmp_path):
    from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

    # Parent directory does not exist, so the connection cannot be opened.
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'db.sqlite'}")
    store = RemoteContentStore(async_sessionmaker(engine, expire_on_commit=False))
    try:
        with pytest.raises(RemoteUnavailable):
            await store.list_videos()
        with pytest.raises(RemoteUnavailable):
            await store.ping()
    finally:
        await engine.dispose()

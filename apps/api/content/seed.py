"""Demo dataset materialized by the local cache on first run."""

from typing import List

from content.models import Comment, Uploader, VideoRecord, now_ms


SYSTEM_UPLOADER = Uploader(id="system", name="System Admin")


def demo_videos() -> List[VideoRecord]:
    created = now_ms()
    return [
        VideoRecord(
            id="demo-1",
            title="Coastal Traces: Fishing Life in Kenjeran",
            source_link="https://drive.google.com/file/d/123456/view",
            embed_url="https://www.youtube.com/embed/LXb3EKWsInQ",
            thumbnail="https://images.unsplash.com/photo-1534234828563-025321aa216e?auto=format&fit=crop&q=80&w=800",
            caption=(
                "A short documentary following the daily rhythm of fishermen on the "
                "Surabaya coast, between modernisation and surviving tradition."
            ),
            created_at=created,
            ratings=[5, 5, 4],
            comments=[
                Comment(
                    id="c1",
                    text="Very cinematic visuals, the colour grading fits perfectly.",
                    author="Student A",
                    created_at=created - 100000,
                    reaction="🔥",
                )
            ],
            view_count=125,
            uploaded_by=SYSTEM_UPLOADER,
        ),
        VideoRecord(
            id="demo-2",
            title="Traditional Market: Behind the Bustle",
            source_link="https://drive.google.com/file/d/789012/view",
            embed_url="https://www.youtube.com/embed/ysz5S6P_z-U",
            thumbnail="https://images.unsplash.com/photo-1533900298318-6b8da08a523e?auto=format&fit=crop&q=80&w=800",
            caption="A visual study of everyday exchanges in a traditional market that is slowly disappearing.",
            created_at=created - 10000,
            ratings=[4, 5],
            view_count=89,
            uploaded_by=SYSTEM_UPLOADER,
        ),
    ]

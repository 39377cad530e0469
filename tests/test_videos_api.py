from fastapi.testclient import TestClient

from vidshare.config import settings
from vidshare.constants import VideoPrivacy, VideoStatus
from vidshare.crud import video_crud
from vidshare.main import app
from vidshare.models import Comment, Like, User, Video


def _upload(client, headers, **fields):
    data = {"title": "My clip", "description": "Something fun", **fields}
    files = {"video": ("clip one.mp4", b"\x00\x00\x00\x18ftypmp42", "video/mp4")}
    return client.post("/api/videos/upload", data=data, files=files, headers=headers)


# ---------- Upload ----------
def test_upload_creates_processing_video(client, db, user, auth):
    r = _upload(client, auth(user), tags="music, live", category="Music")
    assert r.status_code == 201, r.text
    video = r.json()["data"]["video"]
    assert video["status"] == "processing"
    assert video["category"] == "Music"
    assert video["tags"] == ["music", "live"]
    assert video["ownerId"] == user.id
    assert video["format"] == "video/mp4"

    db.expire_all()
    assert db.get(User, user.id).total_videos == 1


def test_upload_requires_file(client, user, auth):
    r = client.post(
        "/api/videos/upload",
        data={"title": "t", "description": "d"},
        headers=auth(user),
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Please upload a video file"


def test_upload_rejects_non_video(client, user, auth):
    files = {"video": ("notes.txt", b"hello", "text/plain")}
    r = client.post(
        "/api/videos/upload",
        data={"title": "t", "description": "d"},
        files=files,
        headers=auth(user),
    )
    assert r.status_code == 400
    assert "Only video files" in r.json()["message"]


def test_upload_requires_auth(client):
    r = _upload(client, {})
    assert r.status_code == 401


def test_upload_rejects_too_many_tags(client, user, auth):
    r = _upload(client, auth(user), tags=",".join(f"t{i}" for i in range(11)))
    assert r.status_code == 400


def test_failed_upload_removes_stored_file(client, user, auth, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("db down")

    monkeypatch.setattr(video_crud, "create", boom)
    settings.videos_dir.mkdir(parents=True, exist_ok=True)
    before = set(settings.videos_dir.glob("*"))

    r = _upload(TestClient(app, raise_server_exceptions=False), auth(user))

    assert r.status_code == 500
    assert set(settings.videos_dir.glob("*")) == before


# ---------- Feed ----------
def test_feed_only_lists_public_ready_videos(client, user, make_video):
    make_video(user, title="visible")
    make_video(user, title="private", privacy=VideoPrivacy.private.value)
    make_video(user, title="processing", status=VideoStatus.processing.value)
    make_video(user, title="draft", is_published=False)

    r = client.get("/api/videos")
    assert r.status_code == 200
    body = r.json()
    assert [v["title"] for v in body["data"]] == ["visible"]
    assert body["pagination"] == {
        "currentPage": 1,
        "totalPages": 1,
        "totalItems": 1,
        "itemsPerPage": 12,
        "hasNextPage": False,
        "hasPreviousPage": False,
    }


def test_feed_pagination_clamps(client, user, make_video):
    for i in range(3):
        make_video(user, title=f"v{i}")

    body = client.get("/api/videos", params={"limit": -1, "page": 0}).json()
    assert body["pagination"]["itemsPerPage"] == 1
    assert body["pagination"]["currentPage"] == 1
    assert body["pagination"]["hasNextPage"] is True

    body = client.get("/api/videos", params={"limit": 0}).json()
    assert body["pagination"]["itemsPerPage"] == 12
    assert len(body["data"]) == 3

    body = client.get("/api/videos", params={"limit": 500}).json()
    assert body["pagination"]["itemsPerPage"] == 100


def test_feed_page_far_past_the_end_is_empty(client, user, make_video):
    make_video(user)
    r = client.get("/api/videos", params={"page": 10**19})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["data"] == []
    assert body["pagination"]["totalItems"] == 1
    assert body["pagination"]["hasNextPage"] is False


def test_feed_sort_and_filters(client, user, make_video):
    make_video(user, title="Guitar lesson", category="Music", views=5)
    make_video(user, title="Cooking", category="Lifestyle", views=50, tags=["food"])
    make_video(user, title="Drums", category="Music", views=20, description="rock beats")

    titles = [v["title"] for v in client.get("/api/videos", params={"sort": "-views"}).json()["data"]]
    assert titles == ["Cooking", "Drums", "Guitar lesson"]

    music = client.get("/api/videos", params={"category": "Music", "sort": "-views"}).json()["data"]
    assert [v["title"] for v in music] == ["Drums", "Guitar lesson"]

    found = client.get("/api/videos", params={"search": "FOOD"}).json()["data"]
    assert [v["title"] for v in found] == ["Cooking"]

    found = client.get("/api/videos", params={"search": "rock", "category": "Music"}).json()["data"]
    assert [v["title"] for v in found] == ["Drums"]


def test_feed_search_treats_wildcards_literally(client, user, make_video):
    make_video(user, title="50% off everything")
    make_video(user, title="plain title")

    body = client.get("/api/videos", params={"search": "%"}).json()
    assert [v["title"] for v in body["data"]] == ["50% off everything"]
    body = client.get("/api/videos", params={"search": "_"}).json()
    assert body["data"] == []


def test_feed_rejects_unknown_sort(client):
    r = client.get("/api/videos", params={"sort": "title"})
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid sort option"


def test_trending_orders_by_score_then_views(client, user, make_video):
    make_video(user, title="low", trending_score=1.0, views=100)
    make_video(user, title="high", trending_score=50.0)
    make_video(user, title="tie-more-views", trending_score=1.0, views=200)
    make_video(user, title="hidden", trending_score=99.0, privacy=VideoPrivacy.private.value)

    r = client.get("/api/videos/trending", params={"limit": 2})
    assert [v["title"] for v in r.json()["data"]["videos"]] == ["high", "tie-more-views"]


def test_recommended_same_category_excluding_self(client, user, make_video):
    base = make_video(user, title="base", category="Gaming")
    make_video(user, title="popular", category="Gaming", views=90)
    make_video(user, title="liked", category="Gaming", views=10, likes_count=40)
    make_video(user, title="other-cat", category="Music", views=1000)

    r = client.get(f"/api/videos/{base.id}/recommended")
    assert [v["title"] for v in r.json()["data"]["videos"]] == ["popular", "liked"]


def test_recommended_for_private_video_is_owner_only(client, user, other, make_video, auth):
    base = make_video(user, category="Gaming", privacy=VideoPrivacy.private.value)
    make_video(user, title="public", category="Gaming")

    assert client.get(f"/api/videos/{base.id}/recommended").status_code == 403
    assert client.get(f"/api/videos/{base.id}/recommended", headers=auth(other)).status_code == 403
    r = client.get(f"/api/videos/{base.id}/recommended", headers=auth(user))
    assert [v["title"] for v in r.json()["data"]["videos"]] == ["public"]


def test_user_videos_show_private_to_owner_only(client, user, other, make_video, auth):
    make_video(user, title="public")
    make_video(user, title="secret", privacy=VideoPrivacy.private.value)

    mine = client.get(f"/api/videos/user/{user.id}", headers=auth(user)).json()["data"]
    theirs = client.get(f"/api/videos/user/{user.id}", headers=auth(other)).json()["data"]
    assert {v["title"] for v in mine} == {"public", "secret"}
    assert [v["title"] for v in theirs] == ["public"]


# ---------- Single video ----------
def test_view_counts_for_other_readers(client, db, user, other, make_video, auth):
    video = make_video(user)

    r = client.get(f"/api/videos/{video.id}", headers=auth(other))
    assert r.status_code == 200
    assert r.json()["data"]["video"]["views"] == 1
    client.get(f"/api/videos/{video.id}")

    db.expire_all()
    assert db.get(Video, video.id).views == 2
    assert db.get(User, user.id).total_views == 2


def test_owner_view_is_not_counted(client, db, user, make_video, auth):
    video = make_video(user)
    r = client.get(f"/api/videos/{video.id}", headers=auth(user))
    assert r.status_code == 200
    assert r.json()["data"]["video"]["views"] == 0


def test_private_video_is_forbidden_to_others(client, db, user, other, make_video, auth):
    video = make_video(user, privacy=VideoPrivacy.private.value)

    for headers in ({}, auth(other)):
        r = client.get(f"/api/videos/{video.id}", headers=headers)
        assert r.status_code == 403
        assert r.json() == {"success": False, "message": "This video is private"}

    db.expire_all()
    assert db.get(Video, video.id).views == 0
    assert client.get(f"/api/videos/{video.id}", headers=auth(user)).status_code == 200


def test_missing_video_is_404(client):
    r = client.get("/api/videos/12345")
    assert r.status_code == 404
    assert r.json()["message"] == "Video not found"


# ---------- Mutations ----------
def test_update_is_owner_or_admin_only(client, user, other, make_user, make_video, auth):
    video = make_video(user)
    admin = make_user("root", role="admin")

    r = client.put(f"/api/videos/{video.id}", json={"title": "nope"}, headers=auth(other))
    assert r.status_code == 403

    r = client.put(
        f"/api/videos/{video.id}",
        json={"title": "New title", "views": 9999, "allowComments": False},
        headers=auth(user),
    )
    assert r.status_code == 200, r.text
    data = r.json()["data"]["video"]
    assert data["title"] == "New title"
    assert data["allowComments"] is False
    assert data["views"] == 0

    r = client.put(f"/api/videos/{video.id}", json={"privacy": "unlisted"}, headers=auth(admin))
    assert r.status_code == 200
    assert r.json()["data"]["video"]["privacy"] == "unlisted"


def test_status_change_is_staff_only(client, user, make_user, make_video, auth):
    video = make_video(user, status=VideoStatus.processing.value)
    mod = make_user("mod", role="moderator")

    assert client.patch(
        f"/api/videos/{video.id}/status", json={"status": "ready"}, headers=auth(user)
    ).status_code == 403

    r = client.patch(f"/api/videos/{video.id}/status", json={"status": "ready"}, headers=auth(mod))
    assert r.status_code == 200
    assert r.json()["data"]["video"]["status"] == "ready"

    r = client.patch(f"/api/videos/{video.id}/status", json={"status": "deleted"}, headers=auth(mod))
    assert r.status_code == 400


def test_delete_removes_comments_likes_and_decrements_owner(
    client, db, make_user, other, make_video, auth
):
    owner = make_user("owner", total_videos=1)
    video = make_video(owner)
    video_id = video.id
    r = client.post(f"/api/videos/{video.id}/comments", json={"content": "top"}, headers=auth(other))
    top_id = r.json()["data"]["comment"]["id"]
    client.post(
        f"/api/videos/{video.id}/comments",
        json={"content": "reply", "parentComment": top_id},
        headers=auth(owner),
    )
    client.post(f"/api/comments/{top_id}/like", headers=auth(owner))
    client.post(f"/api/videos/{video.id}/like", headers=auth(other))

    assert client.delete(f"/api/videos/{video.id}", headers=auth(other)).status_code == 403
    r = client.delete(f"/api/videos/{video.id}", headers=auth(owner))
    assert r.status_code == 200, r.text

    db.expire_all()
    assert db.get(Video, video_id) is None
    assert db.query(Comment).count() == 0
    assert db.query(Like).count() == 0
    assert db.get(User, owner.id).total_videos == 0
    assert client.get(f"/api/videos/{video_id}").status_code == 404


def test_channel_lists_latest_public_videos(client, user, make_video):
    make_video(user, title="one")
    make_video(user, title="hidden", privacy=VideoPrivacy.private.value)

    r = client.get(f"/api/users/{user.id}/channel")
    assert r.status_code == 200
    channel = r.json()["data"]["channel"]
    assert channel["username"] == "alice"
    assert [v["title"] for v in channel["videos"]] == ["one"]

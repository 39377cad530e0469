from vidshare.models import Like


def test_like_then_unlike_video(client, user, other, make_video, auth):
    video = make_video(user)
    headers = auth(other)

    r = client.post(f"/api/videos/{video.id}/like", headers=headers)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["message"] == "Video created successfully"
    assert body["data"]["action"] == "created"
    assert body["data"]["type"] == "like"
    assert body["data"]["likesCount"] == 1
    assert body["data"]["data"]["videoId"] == video.id

    r = client.post(f"/api/videos/{video.id}/like", headers=headers)
    assert r.json()["data"]["action"] == "removed"
    assert r.json()["data"]["likesCount"] == 0
    assert r.json()["data"]["data"] is None


def test_dislike_switches_existing_like(client, db, user, other, make_video, auth):
    video = make_video(user)
    headers = auth(other)
    client.post(f"/api/videos/{video.id}/like", headers=headers)

    r = client.post(f"/api/videos/{video.id}/dislike", headers=headers)
    data = r.json()["data"]
    assert data["action"] == "updated"
    assert (data["likesCount"], data["dislikesCount"]) == (0, 1)
    assert db.query(Like).count() == 1


def test_like_status(client, user, other, make_video, auth):
    video = make_video(user)
    url = f"/api/videos/{video.id}/like-status"

    assert client.get(url, headers=auth(other)).json()["data"] == {"likeStatus": None}
    client.post(f"/api/videos/{video.id}/dislike", headers=auth(other))
    assert client.get(url, headers=auth(other)).json()["data"] == {"likeStatus": "dislike"}
    assert client.get(url).status_code == 401


def test_comment_liked_twice_is_back_to_zero(client, db, user, other, make_video, auth):
    video = make_video(user)
    r = client.post(f"/api/videos/{video.id}/comments", json={"content": "hi"}, headers=auth(user))
    comment_id = r.json()["data"]["comment"]["id"]

    first = client.post(f"/api/comments/{comment_id}/like", headers=auth(other)).json()
    assert first["message"] == "Comment created successfully"
    assert first["data"]["likesCount"] == 1

    second = client.post(f"/api/comments/{comment_id}/like", headers=auth(other)).json()
    assert second["data"]["action"] == "removed"
    assert second["data"]["likesCount"] == 0
    assert db.query(Like).count() == 0


def test_like_requires_auth(client, user, make_video):
    video = make_video(user)
    assert client.post(f"/api/videos/{video.id}/like").status_code == 401


def test_like_missing_targets(client, user, auth):
    assert client.post("/api/videos/77/like", headers=auth(user)).status_code == 404
    assert client.post("/api/comments/77/like", headers=auth(user)).status_code == 404


def test_likes_disabled(client, user, other, make_video, auth):
    video = make_video(user, allow_likes=False)
    r = client.post(f"/api/videos/{video.id}/like", headers=auth(other))
    assert r.status_code == 403
    assert r.json()["message"] == "Likes are disabled for this video"


def test_likers_list_by_type(client, user, other, make_user, make_video, auth):
    video = make_video(user)
    carol = make_user("carol")
    client.post(f"/api/videos/{video.id}/like", headers=auth(other))
    client.post(f"/api/videos/{video.id}/like", headers=auth(carol))
    client.post(f"/api/videos/{video.id}/dislike", headers=auth(user))

    body = client.get(f"/api/videos/{video.id}/likers").json()
    assert {x["user"]["username"] for x in body["data"]} == {"bob", "carol"}
    assert body["pagination"]["totalItems"] == 2

    body = client.get(f"/api/videos/{video.id}/likers", params={"type": "dislike"}).json()
    assert [x["user"]["username"] for x in body["data"]] == ["alice"]


def test_likes_feed_trending(client, db, user, other, make_video, auth):
    video = make_video(user)
    before = client.get("/api/videos/trending").json()["data"]["videos"][0]["trendingScore"]

    client.post(f"/api/videos/{video.id}/like", headers=auth(other))

    after = client.get("/api/videos/trending").json()["data"]["videos"][0]["trendingScore"]
    assert after >= before + 4


def test_private_video_cannot_be_liked_by_others(client, db, user, other, make_video, auth):
    video = make_video(user, privacy="private")

    r = client.post(f"/api/videos/{video.id}/like", headers=auth(other))
    assert r.status_code == 403
    assert r.json()["message"] == "This video is private"
    assert db.query(Like).count() == 0

    r = client.post(f"/api/videos/{video.id}/like", headers=auth(user))
    assert r.status_code == 200
    assert r.json()["data"]["likesCount"] == 1


def test_comment_on_private_video_cannot_be_liked_by_others(
    client, db, user, other, make_video, auth
):
    video = make_video(user, privacy="private")
    r = client.post(f"/api/videos/{video.id}/comments", json={"content": "hi"}, headers=auth(user))
    comment_id = r.json()["data"]["comment"]["id"]

    assert client.post(f"/api/comments/{comment_id}/like", headers=auth(other)).status_code == 403
    assert db.query(Like).count() == 0


def test_private_video_likers_and_status_are_owner_only(client, user, other, make_video, auth):
    video = make_video(user, privacy="private")
    client.post(f"/api/videos/{video.id}/like", headers=auth(user))

    assert client.get(f"/api/videos/{video.id}/likers").status_code == 403
    assert client.get(f"/api/videos/{video.id}/likers", headers=auth(other)).status_code == 403
    body = client.get(f"/api/videos/{video.id}/likers", headers=auth(user)).json()
    assert [x["user"]["username"] for x in body["data"]] == ["alice"]

    url = f"/api/videos/{video.id}/like-status"
    assert client.get(url, headers=auth(other)).status_code == 403
    assert client.get(url, headers=auth(user)).json()["data"] == {"likeStatus": "like"}

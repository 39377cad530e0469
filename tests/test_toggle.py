import pytest
from sqlalchemy import func, select

from vidshare.constants import LikeType
from vidshare.errors import ForbiddenError, NotFoundError
from vidshare.models import Comment, CommentTarget, Like, VideoTarget
from vidshare.services import likes
from vidshare.services.likes import get_like_status, toggle_like


def _likes(db, target):
    return db.scalars(
        select(Like).where(Like.target_kind == target.kind, Like.target_id == target.id)
    ).all()


def test_first_toggle_creates_like(db, user, make_video):
    video = make_video(user)
    target = VideoTarget(video.id)

    result = toggle_like(db, user.id, target, LikeType.like)

    assert result.action == "created"
    assert result.type == "like"
    assert result.like is not None and result.like.target == target
    db.refresh(video)
    assert video.likes_count == 1
    assert video.dislikes_count == 0


def test_same_type_twice_returns_to_absent_and_third_repeats_first(db, user, make_video):
    video = make_video(user)
    target = VideoTarget(video.id)

    first = toggle_like(db, user.id, target, "dislike")
    second = toggle_like(db, user.id, target, "dislike")
    assert second.action == "removed"
    assert _likes(db, target) == []
    assert get_like_status(db, user.id, target) is None

    third = toggle_like(db, user.id, target, "dislike")
    assert (third.action, third.type) == (first.action, first.type)
    db.refresh(video)
    assert video.dislikes_count == 1


def test_switching_type_keeps_a_single_row(db, user, make_video):
    video = make_video(user)
    target = VideoTarget(video.id)

    toggle_like(db, user.id, target, LikeType.like)
    result = toggle_like(db, user.id, target, LikeType.dislike)

    assert result.action == "updated"
    rows = _likes(db, target)
    assert len(rows) == 1
    assert rows[0].type == "dislike"
    db.refresh(video)
    assert (video.likes_count, video.dislikes_count) == (0, 1)


def test_comment_liked_twice_leaves_nothing(db, user, other, make_video):
    video = make_video(user)
    comment = Comment(video_id=video.id, user_id=other.id, content="hello")
    db.add(comment)
    db.commit()
    target = CommentTarget(comment.id)

    toggle_like(db, user.id, target, "like")
    toggle_like(db, user.id, target, "like")

    assert db.scalar(select(func.count(Like.id))) == 0
    db.refresh(comment)
    assert comment.likes_count == 0


def test_comment_dislikes_are_not_counted(db, user, other, make_video):
    video = make_video(user)
    comment = Comment(video_id=video.id, user_id=other.id, content="hello")
    db.add(comment)
    db.commit()

    toggle_like(db, user.id, CommentTarget(comment.id), "dislike")

    db.refresh(comment)
    assert comment.likes_count == 0
    assert len(_likes(db, CommentTarget(comment.id))) == 1


def test_likes_from_different_users_are_independent(db, user, other, make_video):
    video = make_video(user)
    target = VideoTarget(video.id)

    toggle_like(db, user.id, target, "like")
    toggle_like(db, other.id, target, "like")
    toggle_like(db, other.id, target, "like")

    db.refresh(video)
    assert video.likes_count == 1
    assert get_like_status(db, user.id, target) == "like"
    assert get_like_status(db, other.id, target) is None


def test_video_and_comment_targets_with_same_id_do_not_collide(db, user, make_video):
    video = make_video(user)
    comment = Comment(video_id=video.id, user_id=user.id, content="first")
    db.add(comment)
    db.commit()
    assert comment.id == video.id

    toggle_like(db, user.id, VideoTarget(video.id), "like")
    toggle_like(db, user.id, CommentTarget(comment.id), "like")

    assert db.scalar(select(func.count(Like.id))) == 2


def test_missing_target_raises_not_found(db, user):
    with pytest.raises(NotFoundError):
        toggle_like(db, user.id, VideoTarget(999), "like")
    with pytest.raises(NotFoundError):
        toggle_like(db, user.id, CommentTarget(999), "like")


def test_likes_disabled_is_forbidden(db, user, make_video):
    video = make_video(user, allow_likes=False)
    with pytest.raises(ForbiddenError):
        toggle_like(db, user.id, VideoTarget(video.id), "like")


def test_private_video_toggle_is_owner_only(db, user, other, make_video):
    video = make_video(user, privacy="private")
    with pytest.raises(ForbiddenError):
        toggle_like(db, other.id, VideoTarget(video.id), "like")
    assert toggle_like(db, user.id, VideoTarget(video.id), "like").action == "created"


def test_losing_the_insert_race_toggles_the_winning_row(db, user, other, make_video, monkeypatch):
    video = make_video(user)
    target = VideoTarget(video.id)
    # a concurrent request committed its dislike after our lookup
    db.add(Like(user_id=other.id, target_kind=target.kind, target_id=target.id, type="dislike"))
    db.commit()

    real_find = likes._find
    calls = []

    def stale_first_find(session, user_id, tgt):
        calls.append(user_id)
        return None if len(calls) == 1 else real_find(session, user_id, tgt)

    monkeypatch.setattr(likes, "_find", stale_first_find)

    result = toggle_like(db, other.id, target, "like")

    assert len(calls) == 2
    assert (result.action, result.type) == ("updated", "like")
    rows = _likes(db, target)
    assert len(rows) == 1
    assert rows[0].type == "like"
    assert result.like.id == rows[0].id
    db.refresh(video)
    assert (video.likes_count, video.dislikes_count) == (1, 0)

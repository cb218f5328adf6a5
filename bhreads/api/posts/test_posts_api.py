# bhreads/api/posts/test_posts_api.py
import pytest

from bhreads.core.roles import Role


def test_scenario_register_post_like_unlike(client, auth_header):
    response = client.post('/api/auth/register', json={
        "username": "baker1", "email": "b@x.com", "password": "secret1"
    })
    assert response.status_code == 200
    token = response.get_json()["token"]

    response = client.post('/api/posts', json={"title": "My first loaf", "content": "Sourdough success!"},
                           headers=auth_header(token))
    assert response.status_code == 201
    post = response.get_json()["post"]
    assert post["likeCount"] == 0
    assert post["commentCount"] == 0
    assert post["author"]["username"] == "baker1"

    liked = client.post(f'/api/posts/{post["id"]}/like', headers=auth_header(token)).get_json()
    assert liked["isLiked"] is True
    assert liked["likeCount"] == 1

    unliked = client.post(f'/api/posts/{post["id"]}/like', headers=auth_header(token)).get_json()
    assert unliked["isLiked"] is False
    assert unliked["likeCount"] == 0

def test_create_post_requires_title_and_content(client, register, auth_header):
    _, token = register()
    response = client.post('/api/posts', json={"content": "no title"}, headers=auth_header(token))
    assert response.status_code == 400
    assert "title" in response.get_json()["details"]

def test_create_post_requires_token(client):
    response = client.post('/api/posts', json={"title": "My first loaf", "content": "x"})
    assert response.status_code == 401

def test_create_post_normalizes_tags_and_category(client, register, make_post):
    _, token = register()
    post = make_post(token, category="rye", tags=["Dark", " SEEDS "], imageUrl="http://img/1.png")
    assert post["category"] == "rye"
    assert post["tags"] == ["dark", "seeds"]
    assert post["imageUrl"] == "http://img/1.png"

def test_create_post_rejects_unknown_category(client, register, auth_header):
    _, token = register()
    response = client.post('/api/posts', json={"title": "My first loaf", "content": "x", "category": "pizza"},
                           headers=auth_header(token))
    assert response.status_code == 400

def test_get_post_and_not_found(client, register, make_post, auth_header):
    _, token = register()
    post = make_post(token)
    response = client.get(f'/api/posts/{post["id"]}', headers=auth_header(token))
    assert response.status_code == 200
    assert response.get_json()["post"]["title"] == "My first loaf"

    response = client.get('/api/posts/missing', headers=auth_header(token))
    assert response.status_code == 404

def test_feed_flags_for_anonymous_and_authenticated_viewers(client, register, make_post, auth_header):
    _, token = register()
    post = make_post(token)
    client.post(f'/api/posts/{post["id"]}/like', headers=auth_header(token))

    anonymous = client.get('/api/posts').get_json()
    assert anonymous["posts"][0]["isLiked"] is False
    assert anonymous["posts"][0]["likeCount"] == 1

    bad_token = client.get('/api/posts', headers=auth_header("garbage"))
    assert bad_token.status_code == 200
    assert bad_token.get_json()["posts"][0]["isLiked"] is False

    mine = client.get('/api/posts', headers=auth_header(token)).get_json()
    assert mine["posts"][0]["isLiked"] is True
    assert mine["posts"][0]["isReposted"] is False

def test_feed_pagination_newest_first(client, register, make_post):
    _, token = register()
    titles = [f"Loaf number {i}" for i in range(3)]
    for title in titles:
        make_post(token, title=title)

    page1 = client.get('/api/posts?page=1&limit=2').get_json()
    assert page1["total"] == 3
    assert page1["totalPages"] == 2
    assert page1["currentPage"] == 1
    assert [p["title"] for p in page1["posts"]] == ["Loaf number 2", "Loaf number 1"]

    page2 = client.get('/api/posts?page=2&limit=2').get_json()
    assert [p["title"] for p in page2["posts"]] == ["Loaf number 0"]

def test_feed_defaults(client, register, make_post):
    _, token = register()
    for i in range(12):
        make_post(token, title=f"Loaf number {i}")
    body = client.get('/api/posts').get_json()
    assert body["currentPage"] == 1
    assert len(body["posts"]) == 10
    assert body["totalPages"] == 2

def test_feed_filters_by_category_and_tag(client, register, make_post):
    _, token = register()
    make_post(token, title="Rye bread", category="rye", tags=["Dark"])
    make_post(token, title="Baguette bread", category="baguette", tags=["crust"])

    by_category = client.get('/api/posts?category=rye').get_json()
    assert [p["title"] for p in by_category["posts"]] == ["Rye bread"]

    by_tag = client.get('/api/posts?tag=CRUST').get_json()
    assert [p["title"] for p in by_tag["posts"]] == ["Baguette bread"]

def test_update_post_owner_only(client, register, make_post, auth_header):
    _, owner = register("baker1")
    _, other = register("baker2")
    post = make_post(owner)

    response = client.put(f'/api/posts/{post["id"]}', json={"title": "Hijacked!"}, headers=auth_header(other))
    assert response.status_code == 403

    response = client.put(f'/api/posts/{post["id"]}', json={"content": "Even better crumb", "tags": ["Crumb"]},
                          headers=auth_header(owner))
    assert response.status_code == 200
    updated = response.get_json()["post"]
    assert updated["content"] == "Even better crumb"
    assert updated["title"] == "My first loaf"
    assert updated["tags"] == ["crumb"]

def test_update_post_validates_partial_fields(client, register, make_post, auth_header):
    _, owner = register()
    post = make_post(owner)
    response = client.put(f'/api/posts/{post["id"]}', json={"title": "abc"}, headers=auth_header(owner))
    assert response.status_code == 400

def test_delete_post_permissions(client, app, register, make_post, auth_header):
    _, owner = register("baker1")
    _, other = register("baker2")
    _, moderator = app.services['auth'].register("mod", "mod@x.com", "secret1", role=Role.MODERATOR)
    _, admin = app.services['auth'].register("chef", "chef@x.com", "secret1", role=Role.ADMIN)

    post = make_post(owner)
    assert client.delete(f'/api/posts/{post["id"]}', headers=auth_header(other)).status_code == 403
    assert client.delete(f'/api/posts/{post["id"]}', headers=auth_header(moderator)).status_code == 403
    assert client.delete(f'/api/posts/{post["id"]}', headers=auth_header(admin)).status_code == 200

    own = make_post(owner)
    assert client.delete(f'/api/posts/{own["id"]}', headers=auth_header(owner)).status_code == 200
    assert client.delete(f'/api/posts/{own["id"]}', headers=auth_header(owner)).status_code == 404

def test_delete_post_removes_embedded_comments(client, register, make_post, auth_header):
    _, token = register()
    post = make_post(token)
    client.post(f'/api/posts/{post["id"]}/comments', json={"content": "yum"}, headers=auth_header(token))

    assert client.delete(f'/api/posts/{post["id"]}', headers=auth_header(token)).status_code == 200
    assert client.get(f'/api/posts/{post["id"]}', headers=auth_header(token)).status_code == 404
    response = client.post(f'/api/posts/{post["id"]}/comments', json={"content": "still there?"},
                           headers=auth_header(token))
    assert response.status_code == 404

def test_like_unknown_post_is_not_found(client, register, auth_header):
    _, token = register()
    assert client.post('/api/posts/missing/like', headers=auth_header(token)).status_code == 404

def test_likes_from_several_users(client, register, make_post, auth_header):
    _, a = register("baker1")
    _, b = register("baker2")
    post = make_post(a)
    client.post(f'/api/posts/{post["id"]}/like', headers=auth_header(a))
    body = client.post(f'/api/posts/{post["id"]}/like', headers=auth_header(b)).get_json()
    assert body == {"success": True, "likeCount": 2, "isLiked": True}

def test_like_is_not_written_when_transaction_commit_fails(client, register, make_post, auth_header, db, monkeypatch):
    _, token = register()
    post = make_post(token)
    transaction = db.transaction()

    def fail_commit():
        raise RuntimeError("commit failed")

    monkeypatch.setattr(transaction, '_commit', fail_commit)
    monkeypatch.setattr(db, 'transaction', lambda: transaction)

    response = client.post(f'/api/posts/{post["id"]}/like', headers=auth_header(token))
    assert response.status_code == 500
    stored = db.collection('posts').document(post["id"]).get().to_dict()
    assert stored["likes"] == []
    assert stored["like_count"] == 0


def test_repost_once(client, register, make_post, auth_header, db):
    _, owner = register("baker1")
    reposter, token = register("baker2")
    post = make_post(owner, category="brioche", tags=["sweet"])

    response = client.post(f'/api/posts/{post["id"]}/repost', headers=auth_header(token))
    assert response.status_code == 200
    repost = response.get_json()["repost"]
    assert repost["isRepost"] is True
    assert repost["originalPost"]["id"] == post["id"]
    assert repost["author"]["id"] == reposter["id"]
    assert repost["title"] == "Repost: My first loaf"
    assert repost["category"] == "brioche"
    assert repost["tags"] == ["sweet"]

    original = db.collection('posts').document(post["id"]).get().to_dict()
    assert original["repost_count"] == 1
    assert original["reposts"] == [reposter["id"]]

    again = client.post(f'/api/posts/{post["id"]}/repost', headers=auth_header(token))
    assert again.status_code == 400
    assert again.get_json()["error_code"] == "ALREADY_REPOSTED"

    reposts = [d.to_dict() for d in db.collection('posts').stream() if d.to_dict()["is_repost"]]
    assert len(reposts) == 1
    assert db.collection('posts').document(post["id"]).get().to_dict()["repost_count"] == 1

def test_repost_flag_in_feed(client, register, make_post, auth_header):
    _, owner = register("baker1")
    _, token = register("baker2")
    post = make_post(owner)
    client.post(f'/api/posts/{post["id"]}/repost', headers=auth_header(token))

    feed = client.get('/api/posts', headers=auth_header(token)).get_json()["posts"]
    original = next(p for p in feed if p["id"] == post["id"])
    assert original["isReposted"] is True
    assert original["repostCount"] == 1

def test_repost_rolls_back_when_origin_update_fails(app, client, register, make_post, auth_header, db, monkeypatch):
    _, owner = register("baker1")
    _, token = register("baker2")
    post = make_post(owner)

    def fail(*args, **kwargs):
        raise RuntimeError("firestore unavailable")

    monkeypatch.setattr(app.services['posts'], 'apply_engagement', fail)
    response = client.post(f'/api/posts/{post["id"]}/repost', headers=auth_header(token))
    assert response.status_code == 500
    body = response.get_json()
    assert body["success"] is False
    assert "firestore unavailable" not in body["message"]

    docs = [d.to_dict() for d in db.collection('posts').stream()]
    assert len(docs) == 1
    assert docs[0]["repost_count"] == 0


@pytest.mark.parametrize("path", ['/api/posts/x/like', '/api/posts/x/repost', '/api/posts/x/comments'])
def test_engagement_endpoints_require_token(client, path):
    assert client.post(path, json={"content": "hi"}).status_code == 401

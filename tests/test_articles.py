"""
Article endpoint tests: covers the CRUD lifecycle, the category existence
check, submitter-only edits, pagination, and sort orders.

Each test creates the users, categories and articles it needs via the API
rather than relying on shared data, so test order does not matter.
"""
import pytest
from httpx import AsyncClient


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _create_category(client: AsyncClient, headers: dict, name: str = "Climate") -> int:
    resp = await client.post("/api/v1/categories", json={
        "name": name,
        "description": f"{name} stories",
    }, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


async def _create_article(
    client: AsyncClient, headers: dict, category_id: int, title: str = "Solar Park Opens"
) -> dict:
    resp = await client.post("/api/v1/articles", json={
        "title": title,
        "body": f"Body of {title}",
        "category_id": category_id,
    }, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


# ---------------------------------------------------------------------------
# Infrastructure / health
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_health(async_client: AsyncClient):
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


# ---------------------------------------------------------------------------
# Create + get
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_list_articles_empty(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/articles")
    assert resp.status_code == 200
    assert resp.json() == {"items": [], "total": 0, "page": 1, "limit": 10, "pages": 0}


@pytest.mark.asyncio
async def test_create_and_get_article(async_client: AsyncClient, make_user):
    author = await make_user("reporter")
    category_id = await _create_category(async_client, author["headers"])

    article = await _create_article(async_client, author["headers"], category_id)
    assert article["title"] == "Solar Park Opens"
    assert article["category_id"] == category_id
    assert article["category_name"] == "Climate"
    assert article["submitter_id"] == author["id"]
    assert article["submitter_name"] == "reporter"

    resp = await async_client.get(f"/api/v1/articles/{article['id']}")
    assert resp.status_code == 200
    assert resp.json() == article


@pytest.mark.asyncio
async def test_client_supplied_submitter_is_ignored(async_client: AsyncClient, make_user):
    author = await make_user("honest")
    other = await make_user("victim")
    category_id = await _create_category(async_client, author["headers"])

    resp = await async_client.post("/api/v1/articles", json={
        "title": "Spoofed",
        "body": "Trying to post as someone else",
        "category_id": category_id,
        "submitter_id": other["id"],
    }, headers=author["headers"])
    assert resp.status_code == 201
    assert resp.json()["submitter_id"] == author["id"]


@pytest.mark.asyncio
async def test_get_missing_article_is_404(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/articles/99999")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Article not found"}


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_id", ["abc", "0", "-3", "1.5"])
async def test_non_positive_integer_id_is_400(async_client: AsyncClient, bad_id: str):
    resp = await async_client.get(f"/api/v1/articles/{bad_id}")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Validation failed"


@pytest.mark.asyncio
async def test_create_article_validation(async_client: AsyncClient, make_user):
    author = await make_user("sloppy")
    resp = await async_client.post("/api/v1/articles", json={
        "title": "",
        "body": "x" * 5001,
    }, headers=author["headers"])
    assert resp.status_code == 400
    fields = {d.split(":")[0] for d in resp.json()["details"]}
    assert fields == {"title", "body", "category_id"}


# ---------------------------------------------------------------------------
# Referential check on category_id
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_with_missing_category_writes_nothing(async_client: AsyncClient, make_user):
    author = await make_user("lost")
    resp = await async_client.post("/api/v1/articles", json={
        "title": "Nowhere",
        "body": "No such category",
        "category_id": 424242,
    }, headers=author["headers"])
    assert resp.status_code == 404
    assert resp.json() == {"error": "Category not found"}

    listing = await async_client.get("/api/v1/articles")
    assert listing.json()["total"] == 0


@pytest.mark.asyncio
async def test_update_with_missing_category_changes_nothing(async_client: AsyncClient, make_user):
    author = await make_user("mover")
    category_id = await _create_category(async_client, author["headers"])
    article = await _create_article(async_client, author["headers"], category_id)

    put = await async_client.put(f"/api/v1/articles/{article['id']}", json={
        "title": "Moved",
        "body": "Moved body",
        "category_id": 424242,
    }, headers=author["headers"])
    assert put.status_code == 404

    patch = await async_client.patch(
        f"/api/v1/articles/{article['id']}",
        json={"title": "Moved", "category_id": 424242},
        headers=author["headers"],
    )
    assert patch.status_code == 404

    after = await async_client.get(f"/api/v1/articles/{article['id']}")
    assert after.json() == article


# ---------------------------------------------------------------------------
# Update / delete by the submitter
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_replace_article(async_client: AsyncClient, make_user):
    author = await make_user("editor")
    climate = await _create_category(async_client, author["headers"], "Climate")
    aid = await _create_category(async_client, author["headers"], "Aid")
    article = await _create_article(async_client, author["headers"], climate)

    resp = await async_client.put(f"/api/v1/articles/{article['id']}", json={
        "title": "Aid Arrives",
        "body": "Emergency aid reached the region.",
        "category_id": aid,
    }, headers=author["headers"])
    assert resp.status_code == 200
    updated = resp.json()
    assert updated["title"] == "Aid Arrives"
    assert updated["category_name"] == "Aid"
    assert updated["submitter_id"] == author["id"]


@pytest.mark.asyncio
async def test_replace_requires_all_fields(async_client: AsyncClient, make_user):
    author = await make_user("halfway")
    category_id = await _create_category(async_client, author["headers"])
    article = await _create_article(async_client, author["headers"], category_id)

    resp = await async_client.put(
        f"/api/v1/articles/{article['id']}", json={"title": "Only title"}, headers=author["headers"]
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_patch_changes_only_supplied_fields(async_client: AsyncClient, make_user):
    author = await make_user("patcher")
    category_id = await _create_category(async_client, author["headers"])
    article = await _create_article(async_client, author["headers"], category_id)

    resp = await async_client.patch(
        f"/api/v1/articles/{article['id']}", json={"title": "New Title"}, headers=author["headers"]
    )
    assert resp.status_code == 200
    updated = resp.json()
    assert updated["title"] == "New Title"
    assert updated["body"] == article["body"]
    assert updated["category_id"] == article["category_id"]


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{}, {"unknown": "field"}, {"title": None}])
async def test_patch_without_recognized_fields_is_rejected(
    async_client: AsyncClient, make_user, payload: dict
):
    author = await make_user("noop")
    category_id = await _create_category(async_client, author["headers"])
    article = await _create_article(async_client, author["headers"], category_id)

    resp = await async_client.patch(
        f"/api/v1/articles/{article['id']}", json=payload, headers=author["headers"]
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "No fields to update"}

    after = await async_client.get(f"/api/v1/articles/{article['id']}")
    assert after.json() == article


@pytest.mark.asyncio
async def test_delete_article(async_client: AsyncClient, make_user):
    author = await make_user("deleter")
    category_id = await _create_category(async_client, author["headers"])
    article = await _create_article(async_client, author["headers"], category_id)

    resp = await async_client.delete(f"/api/v1/articles/{article['id']}", headers=author["headers"])
    assert resp.status_code == 204
    assert resp.content == b""

    resp = await async_client.get(f"/api/v1/articles/{article['id']}")
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Ownership
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_other_user_cannot_modify_article(async_client: AsyncClient, make_user):
    owner = await make_user("owner")
    intruder = await make_user("intruder")
    category_id = await _create_category(async_client, owner["headers"])
    article = await _create_article(async_client, owner["headers"], category_id)
    url = f"/api/v1/articles/{article['id']}"

    put = await async_client.put(url, json={
        "title": "Hijacked",
        "body": "Hijacked body",
        "category_id": category_id,
    }, headers=intruder["headers"])
    assert put.status_code == 403
    assert put.json() == {"error": "You can only edit your own articles"}

    patch = await async_client.patch(url, json={"title": "Hijacked"}, headers=intruder["headers"])
    assert patch.status_code == 403

    delete = await async_client.delete(url, headers=intruder["headers"])
    assert delete.status_code == 403
    assert delete.json() == {"error": "You can only delete your own articles"}

    after = await async_client.get(url)
    assert after.status_code == 200
    assert after.json() == article


@pytest.mark.asyncio
async def test_modifying_missing_article_is_403(async_client: AsyncClient, make_user):
    """Zero affected rows is reported as 403 whether or not the row exists."""
    user = await make_user("ghost")
    resp = await async_client.delete("/api/v1/articles/99999", headers=user["headers"])
    assert resp.status_code == 403


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_pagination_returns_requested_slice(async_client: AsyncClient, make_user):
    author = await make_user("prolific")
    category_id = await _create_category(async_client, author["headers"])
    ids = [
        (await _create_article(async_client, author["headers"], category_id, f"Article {i}"))["id"]
        for i in range(7)
    ]

    resp = await async_client.get("/api/v1/articles", params={"page": 2, "limit": 3})
    assert resp.status_code == 200
    data = resp.json()
    assert [a["id"] for a in data["items"]] == ids[3:6]
    assert data["total"] == 7
    assert data["page"] == 2
    assert data["limit"] == 3
    assert data["pages"] == 3

    resp = await async_client.get("/api/v1/articles", params={"limit": 3})
    assert [a["id"] for a in resp.json()["items"]] == ids[0:3]


@pytest.mark.asyncio
async def test_pagination_falls_back_to_defaults(async_client: AsyncClient, make_user):
    author = await make_user("defaults")
    category_id = await _create_category(async_client, author["headers"])
    for i in range(12):
        await _create_article(async_client, author["headers"], category_id, f"Article {i}")

    resp = await async_client.get("/api/v1/articles", params={"page": "abc", "limit": "xyz"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["page"] == 1
    assert data["limit"] == 10
    assert len(data["items"]) == 10

    resp = await async_client.get("/api/v1/articles", params={"page": 0, "limit": -5})
    assert resp.json()["page"] == 1
    assert resp.json()["limit"] == 10


@pytest.mark.asyncio
async def test_limit_is_capped(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/articles", params={"limit": 100000})
    assert resp.status_code == 200
    assert resp.json()["limit"] == 100


@pytest.mark.asyncio
async def test_huge_page_returns_empty_page(async_client: AsyncClient, make_user):
    author = await make_user("farpager")
    category_id = await _create_category(async_client, author["headers"])
    await _create_article(async_client, author["headers"], category_id, "Only one")

    resp = await async_client.get("/api/v1/articles", params={"page": "99999999999999999999"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["items"] == []
    assert data["total"] == 1
    assert (data["page"] - 1) * data["limit"] <= 2**63 - 1


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------

async def _seed_for_sorting(client: AsyncClient, make_user) -> None:
    zed = await make_user("zed")
    amy = await make_user("amy")
    politics = await _create_category(client, zed["headers"], "Politics")
    aid = await _create_category(client, zed["headers"], "Aid")
    climate = await _create_category(client, zed["headers"], "Climate")

    await _create_article(client, zed["headers"], politics, "Peace Talks")
    await _create_article(client, amy["headers"], climate, "Cities Go Green")
    await _create_article(client, zed["headers"], aid, "Food Program")
    await _create_article(client, amy["headers"], politics, "Voter Turnout")


@pytest.mark.asyncio
async def test_sort_by_category(async_client: AsyncClient, make_user):
    await _seed_for_sorting(async_client, make_user)
    resp = await async_client.get("/api/v1/articles", params={"sort": "category"})
    names = [a["category_name"] for a in resp.json()["items"]]
    assert names == sorted(names)
    assert names[0] == "Aid"


@pytest.mark.asyncio
async def test_sort_by_author(async_client: AsyncClient, make_user):
    await _seed_for_sorting(async_client, make_user)
    resp = await async_client.get("/api/v1/articles", params={"sort": "author"})
    names = [a["submitter_name"] for a in resp.json()["items"]]
    assert names == sorted(names)
    assert names[0] == "amy"


@pytest.mark.asyncio
async def test_unknown_sort_orders_by_id(async_client: AsyncClient, make_user):
    await _seed_for_sorting(async_client, make_user)
    resp = await async_client.get("/api/v1/articles", params={"sort": "popularity"})
    assert resp.status_code == 200
    ids = [a["id"] for a in resp.json()["items"]]
    assert ids == sorted(ids)


# ---------------------------------------------------------------------------
# Nested listing
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_article_comments_listing(async_client: AsyncClient, make_user):
    author = await make_user("threaded")
    category_id = await _create_category(async_client, author["headers"])
    article = await _create_article(async_client, author["headers"], category_id)
    for i in range(3):
        await async_client.post("/api/v1/comments", json={
            "content": f"Comment {i}",
            "article_id": article["id"],
        }, headers=author["headers"])

    resp = await async_client.get(f"/api/v1/articles/{article['id']}/comments", params={"limit": 2})
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 3
    assert [c["content"] for c in data["items"]] == ["Comment 0", "Comment 1"]

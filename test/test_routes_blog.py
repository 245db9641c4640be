"""
Tests for the blog HTTP routes

Author, admin and public endpoints through the ASGI app with the database,
object store and signed-in user overridden.
"""

from utils.blog_utils import PNG_BYTES, VALID_COVER_URL, VALID_REJECTION_REASON, post_form


def cover_file(name: str = "cover.png"):
    return {"cover_image": (name, PNG_BYTES, "image/png")}


async def create_via_api(client, **overrides) -> dict:
    response = await client.post("/blogs/me", data=post_form(**overrides))
    assert response.status_code == 201, response.text
    return response.json()["post"]


async def publish_via_api(client, auth_state, author, admin, **overrides) -> dict:
    auth_state.login(author)
    post = await create_via_api(client, cover_image_url=VALID_COVER_URL, action="submit_review", **overrides)
    auth_state.login(admin)
    response = await client.post(f"/admin/blog/posts/{post['id']}/approve")
    assert response.status_code == 200, response.text
    return response.json()["post"]


class TestAuthorRoutes:
    """Test /blogs/me endpoints"""

    async def test_requires_login(self, client):
        """Test anonymous access is refused"""
        response = await client.get("/blogs/me")
        assert response.status_code == 401
        error = response.json()["error"]
        assert error["error_code"] == "AUTH_REQUIRED"
        assert error["path"] == "/blogs/me"

    async def test_requires_verified_email(self, client, auth_state, unverified_user):
        """Test unverified users are refused"""
        auth_state.login(unverified_user)
        response = await client.post("/blogs/me", data=post_form())
        assert response.status_code == 401

    async def test_create_draft(self, client, auth_state, author):
        """Test creating a draft from a form"""
        auth_state.login(author)
        response = await client.post("/blogs/me", data=post_form())

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Draft created successfully."
        assert body["post"]["status"] == "draft"
        assert body["post"]["slug"] == "my-first-run-blog-post"
        assert body["post"]["tags"] == ["training", "10k"]

    async def test_create_with_cover_and_submit(self, client, auth_state, author, object_store):
        """Test uploading a cover and submitting in one request"""
        auth_state.login(author)
        response = await client.post("/blogs/me", data=post_form(action="submit_review"), files=cover_file())

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Post submitted for review."
        assert body["post"]["status"] == "pending"
        assert body["post"]["cover_image_url"].startswith(object_store.BASE_URL)

    async def test_create_invalid(self, client, auth_state, author):
        """Test validation errors are returned together"""
        auth_state.login(author)
        response = await client.post("/blogs/me", data=post_form(title="Run", category="Cycling"))

        assert response.status_code == 400
        errors = response.json()["error"]["details"]["errors"]
        assert "Title must be between 5 and 150 characters." in errors
        assert "Category is invalid." in errors

    async def test_submit_incomplete(self, client, auth_state, author):
        """Test the readiness gate over HTTP"""
        auth_state.login(author)
        post = await create_via_api(client)

        response = await client.post(f"/blogs/me/{post['id']}/submit")
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["message"] == "Post is incomplete and cannot be submitted yet."
        assert error["details"]["errors"] == ["Cover image is required before submitting for review."]

    async def test_update_and_list(self, client, auth_state, author):
        """Test editing a draft and listing by status"""
        auth_state.login(author)
        post = await create_via_api(client)

        response = await client.post(f"/blogs/me/{post['id']}", data=post_form(excerpt="Edited excerpt"))
        assert response.status_code == 200
        assert response.json()["message"] == "Draft updated successfully."
        assert response.json()["post"]["excerpt"] == "Edited excerpt"

        listing = await client.get("/blogs/me", params={"status": "draft"})
        assert [item["id"] for item in listing.json()["posts"]] == [post["id"]]

    async def test_remove_cover(self, client, auth_state, author, object_store):
        """Test removing the cover from the edit form"""
        auth_state.login(author)
        response = await client.post("/blogs/me", data=post_form(), files=cover_file())
        post = response.json()["post"]

        response = await client.post(f"/blogs/me/{post['id']}", data=post_form(remove_cover_image="1"))
        assert response.json()["post"]["cover_image_url"] == ""
        assert len(object_store.deleted) == 1

    async def test_foreign_post_not_found(self, client, auth_state, author, other_author):
        """Test another author's post is invisible"""
        auth_state.login(author)
        post = await create_via_api(client)

        auth_state.login(other_author)
        response = await client.get(f"/blogs/me/{post['id']}")
        assert response.status_code == 404
        assert response.json()["error"]["error_code"] == "RESOURCE_POST_NOT_FOUND"

    async def test_delete(self, client, auth_state, author):
        """Test soft delete"""
        auth_state.login(author)
        post = await create_via_api(client)

        response = await client.post(f"/blogs/me/{post['id']}/delete")
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Post deleted successfully."}
        assert (await client.get(f"/blogs/me/{post['id']}")).status_code == 404

    async def test_locked_post_conflicts(self, client, auth_state, author, admin):
        """Test editing a published post"""
        post = await publish_via_api(client, auth_state, author, admin)

        auth_state.login(author)
        response = await client.post(f"/blogs/me/{post['id']}", data=post_form())
        assert response.status_code == 409
        assert response.json()["error"]["details"]["current_status"] == "published"


class TestAdminRoutes:
    """Test /admin/blog/posts endpoints"""

    async def test_author_forbidden(self, client, auth_state, author):
        """Test non-admins get 403"""
        auth_state.login(author)
        response = await client.get("/admin/blog/posts")
        assert response.status_code == 403
        assert response.json()["error"]["error_code"] == "AUTH_PERMISSION_DENIED"

    async def test_queue_and_approve(self, client, auth_state, author, admin):
        """Test the pending queue and approval"""
        auth_state.login(author)
        post = await create_via_api(client, cover_image_url=VALID_COVER_URL, action="submit_review")

        auth_state.login(admin)
        queue = await client.get("/admin/blog/posts")
        assert [item["id"] for item in queue.json()["posts"]] == [post["id"]]

        response = await client.post(f"/admin/blog/posts/{post['id']}/approve")
        assert response.status_code == 200
        assert response.json()["message"] == "Post approved and published."
        assert response.json()["post"]["status"] == "published"

    async def test_approve_draft_conflicts(self, client, auth_state, author, admin):
        """Test approving a draft"""
        auth_state.login(author)
        post = await create_via_api(client)

        auth_state.login(admin)
        response = await client.post(f"/admin/blog/posts/{post['id']}/approve")
        assert response.status_code == 409
        assert response.json()["error"]["message"] == 'Cannot approve a post from "draft" status.'

    async def test_reject(self, client, auth_state, author, admin):
        """Test rejection with a reason"""
        auth_state.login(author)
        post = await create_via_api(client, cover_image_url=VALID_COVER_URL, action="submit_review")

        auth_state.login(admin)
        short = await client.post(f"/admin/blog/posts/{post['id']}/reject", json={"rejection_reason": "no"})
        assert short.status_code == 400

        response = await client.post(
            f"/admin/blog/posts/{post['id']}/reject", json={"rejection_reason": VALID_REJECTION_REASON}
        )
        assert response.status_code == 200
        assert response.json()["post"]["status"] == "rejected"
        assert response.json()["post"]["rejection_reason"] == VALID_REJECTION_REASON

    async def test_archive(self, client, auth_state, author, admin):
        """Test archiving a published post"""
        post = await publish_via_api(client, auth_state, author, admin)

        response = await client.post(f"/admin/blog/posts/{post['id']}/archive")
        assert response.status_code == 200
        assert response.json()["post"]["status"] == "archived"

    async def test_autosave_and_review(self, client, auth_state, author, admin):
        """Test autosave response and revision history"""
        auth_state.login(author)
        post = await create_via_api(client, cover_image_url=VALID_COVER_URL, action="submit_review")

        auth_state.login(admin)
        response = await client.post(
            f"/admin/blog/posts/{post['id']}/autosave",
            json={"moderation_notes": "Check pacing numbers", "featured": "on"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Post auto-saved."
        assert body["changed_fields"] == ["featured", "moderation_notes"]
        assert body["post"]["featured"] is True

        review = await client.get(f"/admin/blog/posts/{post['id']}/review")
        assert review.status_code == 200
        revisions = review.json()["revisions"]
        assert len(revisions) == 1
        assert revisions[0]["changed_fields"] == ["featured", "moderation_notes"]

    async def test_missing_post(self, client, auth_state, admin):
        """Test unknown post id"""
        auth_state.login(admin)
        response = await client.get("/admin/blog/posts/999")
        assert response.status_code == 404


class TestPublicRoutes:
    """Test /blog endpoints"""

    async def test_list_and_read(self, client, auth_state, author, admin):
        """Test anonymous listing and reading"""
        post = await publish_via_api(client, auth_state, author, admin)
        auth_state.login(None)

        listing = await client.get("/blog")
        assert listing.status_code == 200
        assert [item["slug"] for item in listing.json()["posts"]] == [post["slug"]]

        response = await client.get(f"/blog/{post['slug']}", headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1"})
        assert response.status_code == 200
        body = response.json()
        assert body["post"]["views"] == 1
        assert body["author_name"] == "Ana Runner"
        assert body["seo"]["title"] == "My First Run Blog Post - helloRun Blog"

        again = await client.get(f"/blog/{post['slug']}", headers={"X-Forwarded-For": "203.0.113.9"})
        assert again.json()["post"]["views"] == 1

    async def test_unpublished_is_404(self, client, auth_state, author):
        """Test that drafts are not readable"""
        auth_state.login(author)
        post = await create_via_api(client)
        auth_state.login(None)

        response = await client.get(f"/blog/{post['slug']}")
        assert response.status_code == 404

    async def test_reader_payload_hides_moderation_fields(self, client, auth_state, author, admin):
        """Test that readers never see notes, editor source or reviewer fields"""
        post = await publish_via_api(client, auth_state, author, admin)
        notes = await client.post(
            f"/admin/blog/posts/{post['id']}/autosave",
            json={"moderation_notes": "Internal: check the quoted race results"},
        )
        assert notes.json()["post"]["moderation_notes"] == "Internal: check the quoted race results"
        auth_state.login(None)

        response = await client.get(f"/blog/{post['slug']}")
        assert response.status_code == 200
        public_post = response.json()["post"]
        for field in ("moderation_notes", "content_raw", "approved_by", "rejected_by", "rejection_reason"):
            assert field not in public_post
        assert "Internal: check" not in response.text

    async def test_author_payload_hides_moderation_notes(self, client, auth_state, author, admin):
        """Test that only moderators see internal notes"""
        auth_state.login(author)
        post = await create_via_api(client)

        auth_state.login(admin)
        await client.post(f"/admin/blog/posts/{post['id']}/autosave", json={"moderation_notes": "Needs a better intro"})
        admin_view = await client.get(f"/admin/blog/posts/{post['id']}")
        assert admin_view.json()["post"]["moderation_notes"] == "Needs a better intro"

        auth_state.login(author)
        author_view = await client.get(f"/blogs/me/{post['id']}")
        assert author_view.status_code == 200
        assert "moderation_notes" not in author_view.json()["post"]

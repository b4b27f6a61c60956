from supabase import Client
from soular.config.content_config import (
    FORUM_CATEGORIES, FORUM_SORT_COLUMNS, FORUM_TITLE_MAX, FORUM_DISCUSSION_CONTENT_MAX,
    FORUM_POST_CONTENT_MAX, FORUM_MAX_TAGS
)
from soular.core.dependencies import check_owner_or_permission
from soular.core.utils import (
    row_or_none, rows, result_count, clean_search, ilike_any, is_uuid, is_unique_violation,
    normalize_tags, utc_now_iso
)
from soular.modules.admin.service import ModerationService
from soular.modules.forum.schemas import (
    DiscussionCreate, DiscussionUpdate, PostCreate, DiscussionResponse, DiscussionListResponse,
    PostResponse, LikeStatus, UserActivityResponse, UserActivityStats
)
from soular.modules.notifications.service import NotificationService
from typing import List, Optional, Dict, Any
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

DISCUSSION_COLUMNS = "*, profiles!forum_discussions_author_id_fkey (id, name, avatar)"
POST_COLUMNS = "*, profiles!forum_posts_author_id_fkey (id, name, avatar)"
USER_DISCUSSION_COLUMNS = (
    "id, title, content, category, tags, is_pinned, is_locked, view_count, reply_count, "
    "created_at, updated_at, profiles:author_id (id, name, avatar)"
)
USER_POST_COLUMNS = (
    "id, discussion_id, content, created_at, updated_at, "
    "profiles:author_id (id, name, avatar), forum_discussions!inner (id, title)"
)


def validate_title(title: Any) -> str:
    if not isinstance(title, str) or not title.strip():
        raise HTTPException(status_code=400, detail="Title is required")
    if len(title) > FORUM_TITLE_MAX:
        raise HTTPException(status_code=400, detail=f"Title must be {FORUM_TITLE_MAX} characters or less")
    return title.strip()


def validate_content(content: Any, max_length: int) -> str:
    if not isinstance(content, str) or not content.strip():
        raise HTTPException(status_code=400, detail="Content is required")
    if len(content) > max_length:
        raise HTTPException(status_code=400, detail=f"Content must be {max_length:,} characters or less")
    return content.strip()


def validate_category(category: Any) -> str:
    if not category or category not in FORUM_CATEGORIES:
        raise HTTPException(status_code=400, detail="Invalid category")
    return category


def validate_tags(tags: Any) -> List[str]:
    if tags is None:
        return []
    if not isinstance(tags, list):
        raise HTTPException(status_code=400, detail="Tags must be an array")
    return normalize_tags(tags, FORUM_MAX_TAGS)


class ForumService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.notifications = NotificationService(supabase)
        self.moderation = ModerationService(supabase)

    def list_discussions(
        self,
        category: str = "all",
        sort: str = "latest",
        limit: int = 20,
        offset: int = 0,
        search: Optional[str] = None
    ) -> DiscussionListResponse:
        try:
            query = self.supabase.table("forum_discussions").select(DISCUSSION_COLUMNS, count="exact")
            if category and category != "all":
                query = query.eq("category", category)
            term = clean_search(search)
            if term:
                query = query.or_(ilike_any(["title", "content"], term))
            sort_column = FORUM_SORT_COLUMNS.get(sort, FORUM_SORT_COLUMNS["latest"])
            result = query.order(sort_column, desc=True)\
                .range(offset, offset + limit - 1)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching forum discussions: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch discussions")
        total = result_count(result)
        return DiscussionListResponse(
            discussions=[DiscussionResponse(**d) for d in rows(result)],
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + limit < total
        )

    def create_discussion(self, discussion_data: DiscussionCreate, author_id: str) -> DiscussionResponse:
        title = validate_title(discussion_data.title)
        content = validate_content(discussion_data.content, FORUM_DISCUSSION_CONTENT_MAX)
        category = validate_category(discussion_data.category)
        tags = validate_tags(discussion_data.tags)

        try:
            discussion = row_or_none(
                self.supabase.table("forum_discussions").insert({
                    "title": title,
                    "content": content,
                    "author_id": author_id,
                    "category": category,
                    "tags": tags,
                }).execute()
            )
        except Exception as e:
            logger.error(f"Error creating discussion: {e}")
            raise HTTPException(status_code=500, detail="Failed to create discussion")
        if not discussion:
            raise HTTPException(status_code=500, detail="Failed to create discussion")
        return DiscussionResponse(**{**discussion, "is_author": True})

    def _get_discussion_row(self, discussion_id: str, columns: str = "*") -> dict:
        if not is_uuid(discussion_id):
            raise HTTPException(status_code=404, detail="Discussion not found")
        try:
            discussion = row_or_none(
                self.supabase.table("forum_discussions")
                .select(columns)
                .eq("id", discussion_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching discussion {discussion_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch discussion")
        if not discussion:
            raise HTTPException(status_code=404, detail="Discussion not found")
        return discussion

    def get_discussion(self, discussion_id: str, user_id: Optional[str] = None) -> DiscussionResponse:
        discussion = self._get_discussion_row(discussion_id, DISCUSSION_COLUMNS)
        try:
            self.supabase.rpc("increment_discussion_views", {"p_discussion_id": discussion_id}).execute()
        except Exception as e:
            logger.warning(f"Failed to increment views for discussion {discussion_id}: {e}")
        return DiscussionResponse(**{
            **discussion,
            "is_author": user_id is not None and user_id == discussion.get("author_id"),
        })

    def update_discussion(self, discussion_id: str, user_id: str, discussion_data: DiscussionUpdate) -> DiscussionResponse:
        existing = self._get_discussion_row(discussion_id, "author_id, is_locked")
        if existing.get("author_id") != user_id:
            raise HTTPException(status_code=403, detail="You can only edit your own discussions")
        if existing.get("is_locked"):
            raise HTTPException(status_code=403, detail="This discussion is locked and cannot be edited")

        fields = discussion_data.model_dump(exclude_unset=True)
        updates = {}
        if "title" in fields:
            updates["title"] = validate_title(fields["title"])
        if "content" in fields:
            updates["content"] = validate_content(fields["content"], FORUM_DISCUSSION_CONTENT_MAX)
        if "category" in fields:
            updates["category"] = validate_category(fields["category"])
        if "tags" in fields:
            updates["tags"] = validate_tags(fields["tags"])
        if not updates:
            raise HTTPException(status_code=400, detail="No valid fields to update")
        updates["updated_at"] = utc_now_iso()

        try:
            discussion = row_or_none(
                self.supabase.table("forum_discussions")
                .update(updates)
                .eq("id", discussion_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error updating discussion {discussion_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update discussion")
        if not discussion:
            raise HTTPException(status_code=404, detail="Discussion not found")
        return DiscussionResponse(**{**discussion, "is_author": True})

    def delete_discussion(self, discussion_id: str, user_data: dict, cache: Optional[Dict[str, Any]] = None) -> bool:
        existing = self._get_discussion_row(discussion_id, "author_id, title")
        as_moderator = check_owner_or_permission(
            existing.get("author_id"), user_data, "forum:moderate", self.supabase,
            "You can only delete your own discussions", cache
        )
        try:
            self.supabase.table("forum_discussions").delete().eq("id", discussion_id).execute()
        except Exception as e:
            logger.error(f"Error deleting discussion {discussion_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete discussion")

        if as_moderator:
            self.moderation.log_action(
                user_data["id"], "delete_discussion", "discussion", discussion_id,
                reason="Discussion deleted by moderator",
                metadata={"title": existing.get("title"), "author_id": existing.get("author_id")}
            )
        return True

    def list_posts(self, discussion_id: str, user_id: Optional[str] = None) -> List[PostResponse]:
        self._get_discussion_row(discussion_id, "id")
        try:
            result = self.supabase.table("forum_posts")\
                .select(POST_COLUMNS)\
                .eq("discussion_id", discussion_id)\
                .order("created_at")\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching posts for discussion {discussion_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch posts")
        return [
            PostResponse(**{**post, "is_author": user_id is not None and user_id == post.get("author_id")})
            for post in rows(result)
        ]

    def create_post(self, discussion_id: str, author_id: str, post_data: PostCreate) -> PostResponse:
        """
        Reply to a discussion.
        Bumps reply_count and last_activity_at, then notifies the discussion
        author; neither follow-up can fail the reply itself.
        """
        discussion = self._get_discussion_row(discussion_id, "id, title, author_id, is_locked, reply_count")
        if discussion.get("is_locked"):
            raise HTTPException(status_code=403, detail="This discussion is locked and cannot receive new posts")
        content = validate_content(post_data.content, FORUM_POST_CONTENT_MAX)

        try:
            post = row_or_none(
                self.supabase.table("forum_posts").insert({
                    "discussion_id": discussion_id,
                    "author_id": author_id,
                    "content": content,
                }).execute()
            )
        except Exception as e:
            logger.error(f"Error creating post in discussion {discussion_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create post")
        if not post:
            raise HTTPException(status_code=500, detail="Failed to create post")

        try:
            self.supabase.table("forum_discussions")\
                .update({
                    "reply_count": (discussion.get("reply_count") or 0) + 1,
                    "last_activity_at": utc_now_iso(),
                })\
                .eq("id", discussion_id)\
                .execute()
        except Exception as e:
            logger.warning(f"Error updating reply count for discussion {discussion_id}: {e}")

        discussion_author = discussion.get("author_id")
        if discussion_author and discussion_author != author_id:
            self.notifications.notify(
                discussion_author,
                "forum_reply",
                "New reply to your discussion",
                message=f'Someone replied to "{discussion.get("title")}"',
                link_url=f"/forum/{discussion_id}",
                actor_id=author_id
            )

        return PostResponse(**{**post, "is_author": True})

    def _get_post_row(self, post_id: str) -> dict:
        if not is_uuid(post_id):
            raise HTTPException(status_code=404, detail="Post not found")
        try:
            post = row_or_none(
                self.supabase.table("forum_posts")
                .select("author_id, discussion_id")
                .eq("id", post_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching post {post_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch post")
        if not post:
            raise HTTPException(status_code=404, detail="Post not found")
        return post

    def update_post(self, post_id: str, user_id: str, post_data: PostCreate) -> PostResponse:
        existing = self._get_post_row(post_id)
        if existing.get("author_id") != user_id:
            raise HTTPException(status_code=403, detail="You can only edit your own posts")
        try:
            discussion = row_or_none(
                self.supabase.table("forum_discussions")
                .select("is_locked")
                .eq("id", existing["discussion_id"])
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching discussion for post {post_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update post")
        if discussion and discussion.get("is_locked"):
            raise HTTPException(status_code=403, detail="This discussion is locked and posts cannot be edited")
        content = validate_content(post_data.content, FORUM_POST_CONTENT_MAX)

        try:
            post = row_or_none(
                self.supabase.table("forum_posts")
                .update({"content": content, "updated_at": utc_now_iso()})
                .eq("id", post_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error updating post {post_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update post")
        if not post:
            raise HTTPException(status_code=404, detail="Post not found")
        return PostResponse(**{**post, "is_author": True})

    def delete_post(self, post_id: str, user_data: dict, cache: Optional[Dict[str, Any]] = None) -> bool:
        existing = self._get_post_row(post_id)
        as_moderator = check_owner_or_permission(
            existing.get("author_id"), user_data, "forum:moderate", self.supabase,
            "You can only delete your own posts", cache
        )
        try:
            self.supabase.table("forum_posts").delete().eq("id", post_id).execute()
        except Exception as e:
            logger.error(f"Error deleting post {post_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete post")

        discussion_id = existing["discussion_id"]
        try:
            discussion = row_or_none(
                self.supabase.table("forum_discussions")
                .select("reply_count")
                .eq("id", discussion_id)
                .limit(1)
                .execute()
            )
            if discussion:
                self.supabase.table("forum_discussions")\
                    .update({"reply_count": max(0, (discussion.get("reply_count") or 0) - 1)})\
                    .eq("id", discussion_id)\
                    .execute()
        except Exception as e:
            logger.warning(f"Error updating reply count for discussion {discussion_id}: {e}")

        if as_moderator:
            self.moderation.log_action(
                user_data["id"], "delete_post", "post", post_id,
                reason="Post deleted by moderator",
                metadata={"discussion_id": discussion_id, "author_id": existing.get("author_id")}
            )
        return True

    def like_status(self, discussion_id: str, user_id: str) -> LikeStatus:
        if not is_uuid(discussion_id):
            return LikeStatus(is_liked=False)
        try:
            like = row_or_none(
                self.supabase.table("forum_discussion_likes")
                .select("id")
                .eq("discussion_id", discussion_id)
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error checking like status: {e}")
            raise HTTPException(status_code=500, detail="Failed to check like status")
        return LikeStatus(is_liked=like is not None)

    def like_discussion(self, discussion_id: str, user_id: str) -> bool:
        self._get_discussion_row(discussion_id, "id")
        try:
            if self.like_status(discussion_id, user_id).is_liked:
                raise HTTPException(status_code=409, detail="Already liked this discussion")
            self.supabase.table("forum_discussion_likes").insert({
                "discussion_id": discussion_id,
                "user_id": user_id,
            }).execute()
            return True
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="Already liked this discussion")
            logger.error(f"Error liking discussion {discussion_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to like discussion")

    def unlike_discussion(self, discussion_id: str, user_id: str) -> bool:
        if not is_uuid(discussion_id):
            raise HTTPException(status_code=404, detail="Discussion not found")
        try:
            self.supabase.table("forum_discussion_likes")\
                .delete()\
                .eq("discussion_id", discussion_id)\
                .eq("user_id", user_id)\
                .execute()
            return True
        except Exception as e:
            logger.error(f"Error unliking discussion {discussion_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to unlike discussion")

    def user_activity(self, user_id: str) -> UserActivityResponse:
        """A member's discussions and posts, newest first"""
        if not is_uuid(user_id):
            raise HTTPException(status_code=404, detail="User not found")
        try:
            profile = row_or_none(
                self.supabase.table("profiles")
                .select("id, name, username, avatar")
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
            if not profile:
                raise HTTPException(status_code=404, detail="User not found")

            discussions = rows(
                self.supabase.table("forum_discussions")
                .select(USER_DISCUSSION_COLUMNS)
                .eq("author_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
            posts = rows(
                self.supabase.table("forum_posts")
                .select(USER_POST_COLUMNS)
                .eq("author_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching forum activity for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch user activity")

        return UserActivityResponse(
            profile=profile,
            discussions=[DiscussionResponse(**d) for d in discussions],
            posts=[PostResponse(**p) for p in posts],
            stats=UserActivityStats(total_discussions=len(discussions), total_posts=len(posts))
        )

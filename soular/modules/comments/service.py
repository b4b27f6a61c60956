from supabase import Client
from soular.core.dependencies import check_owner_or_permission
from soular.core.utils import row_or_none, rows, result_count, is_uuid, is_unique_violation, utc_now_iso
from soular.modules.admin.service import ModerationService
from soular.modules.comments.schemas import CommentCreate, CommentResponse, CommentListResponse, CommentResult
from soular.modules.films.service import FilmService
from typing import Optional, Dict, Any
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def validate_comment(comment_data: CommentCreate) -> Dict[str, Any]:
    """Trimmed comment text and rating, or 400"""
    comment = (comment_data.comment or "").strip()
    if not comment:
        raise HTTPException(status_code=400, detail="Comment is required")
    rating = comment_data.rating
    if rating is not None and not 1 <= rating <= 5:
        raise HTTPException(status_code=400, detail="Rating must be between 1 and 5")
    return {"comment": comment, "rating": rating or None}


def _scalar(result: Any) -> float:
    data = getattr(result, "data", None)
    if isinstance(data, list):
        data = data[0] if data else None
    if isinstance(data, dict):
        data = next(iter(data.values()), None)
    try:
        return float(data or 0)
    except (TypeError, ValueError):
        return 0.0


class CommentService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_comments(self, film_id: str, limit: int = 50, offset: int = 0) -> CommentListResponse:
        if not is_uuid(film_id):
            raise HTTPException(status_code=404, detail="Film not found")
        try:
            result = self.supabase.rpc("get_film_comments", {
                "p_film_id": film_id,
                "p_limit": limit,
                "p_offset": offset,
            }).execute()
            comments = [CommentResponse(**c) for c in rows(result)]

            count_result = self.supabase.table("film_comments")\
                .select("id", count="exact", head=True)\
                .eq("film_id", film_id)\
                .execute()

            average = self.supabase.rpc("get_film_average_rating", {"p_film_id": film_id}).execute()
        except Exception as e:
            logger.error(f"Error fetching comments for film {film_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch comments")

        return CommentListResponse(
            comments=comments,
            total=result_count(count_result),
            average_rating=_scalar(average),
            limit=limit,
            offset=offset
        )

    def _get_comment(self, film_id: str, comment_id: str) -> dict:
        if not is_uuid(comment_id) or not is_uuid(film_id):
            raise HTTPException(status_code=404, detail="Comment not found")
        try:
            comment = row_or_none(
                self.supabase.table("film_comments")
                .select("id, user_id, film_id")
                .eq("id", comment_id)
                .eq("film_id", film_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching comment {comment_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch comment")
        if not comment:
            raise HTTPException(status_code=404, detail="Comment not found")
        return comment

    def create_comment(self, film_id: str, user_id: str, comment_data: CommentCreate) -> CommentResult:
        fields = validate_comment(comment_data)
        if not FilmService(self.supabase).film_exists(film_id):
            raise HTTPException(status_code=404, detail="Film not found")

        try:
            created = row_or_none(
                self.supabase.table("film_comments").insert({
                    "film_id": film_id,
                    "user_id": user_id,
                    **fields,
                }).execute()
            )
            if not created:
                raise HTTPException(status_code=500, detail="Failed to create comment")

            profile = row_or_none(
                self.supabase.table("profiles")
                .select("username, avatar")
                .eq("id", user_id)
                .limit(1)
                .execute()
            ) or {}
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating comment on film {film_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create comment")

        return CommentResult(success=True, comment=CommentResponse(**{
            **created,
            "username": profile.get("username") or "Unknown",
            "user_avatar": profile.get("avatar"),
            "is_liked": False,
        }))

    def update_comment(self, film_id: str, comment_id: str, user_id: str, comment_data: CommentCreate) -> CommentResult:
        fields = validate_comment(comment_data)
        existing = self._get_comment(film_id, comment_id)
        if existing.get("user_id") != user_id:
            raise HTTPException(status_code=403, detail="You can only edit your own comments")

        try:
            updated = row_or_none(
                self.supabase.table("film_comments")
                .update({**fields, "updated_at": utc_now_iso()})
                .eq("id", comment_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error updating comment {comment_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update comment")
        if not updated:
            raise HTTPException(status_code=404, detail="Comment not found")
        return CommentResult(success=True, comment=CommentResponse(**updated))

    def delete_comment(
        self,
        film_id: str,
        comment_id: str,
        user_data: dict,
        cache: Optional[Dict[str, Any]] = None
    ) -> bool:
        existing = self._get_comment(film_id, comment_id)
        as_moderator = check_owner_or_permission(
            existing.get("user_id"), user_data, "comments:moderate", self.supabase,
            "You can only delete your own comments", cache
        )

        try:
            self.supabase.table("film_comments").delete().eq("id", comment_id).execute()
        except Exception as e:
            logger.error(f"Error deleting comment {comment_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete comment")

        if as_moderator:
            ModerationService(self.supabase).log_action(
                user_data["id"], "delete_post", "comment", comment_id,
                reason="Comment deleted by moderator",
                metadata={"film_id": film_id, "author_id": existing.get("user_id")}
            )
        return True

    def like_comment(self, film_id: str, comment_id: str, user_id: str) -> bool:
        self._get_comment(film_id, comment_id)
        try:
            existing = row_or_none(
                self.supabase.table("film_comment_likes")
                .select("id")
                .eq("comment_id", comment_id)
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
            if existing:
                raise HTTPException(status_code=400, detail="You already liked this comment")
            self.supabase.table("film_comment_likes").insert({
                "comment_id": comment_id,
                "user_id": user_id,
            }).execute()
            return True
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=400, detail="You already liked this comment")
            logger.error(f"Error liking comment {comment_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to like comment")

    def unlike_comment(self, comment_id: str, user_id: str) -> bool:
        if not is_uuid(comment_id):
            raise HTTPException(status_code=404, detail="Comment not found")
        try:
            self.supabase.table("film_comment_likes")\
                .delete()\
                .eq("comment_id", comment_id)\
                .eq("user_id", user_id)\
                .execute()
            return True
        except Exception as e:
            logger.error(f"Error unliking comment {comment_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to unlike comment")

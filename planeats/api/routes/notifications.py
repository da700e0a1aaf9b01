from typing import Optional

from fastapi import APIRouter, Depends, Query

from planeats.api.routes.deps import get_current_user, get_notifications
from planeats.domain.User import User
from planeats.domain.errors import NotFoundError
from planeats.utilities.validators import MarkReadInput

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("")
def list_notifications(
    read: Optional[bool] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(get_current_user),
    notifications=Depends(get_notifications),
):
    items, total, total_pages = notifications.list_for_user(user.id, read=read, page=page, limit=limit)
    return {
        "notifications": [n.to_dict() for n in items],
        "unreadCount": notifications.count_unread(user.id),
        "pagination": {
            "currentPage": page,
            "totalPages": total_pages,
            "totalNotifications": total,
            "hasNext": page < total_pages,
            "hasPrev": page > 1,
        },
    }


@router.put("/read")
def mark_as_read(body: Optional[MarkReadInput] = None, user: User = Depends(get_current_user),
                 notifications=Depends(get_notifications)):
    ids = body.notification_ids if body else None
    modified = notifications.mark_as_read(user.id, ids)
    return {"message": "Notifications marked as read", "modifiedCount": modified}


@router.delete("/{notification_id}")
def delete_notification(notification_id: str, user: User = Depends(get_current_user),
                        notifications=Depends(get_notifications)):
    if not notifications.delete_for_user(notification_id, user.id):
        raise NotFoundError("Notification not found", title="Notification not found")
    return {"message": "Notification deleted successfully"}


@router.delete("")
def delete_old_notifications(days: int = Query(30, ge=0), user: User = Depends(get_current_user),
                             notifications=Depends(get_notifications)):
    deleted = notifications.delete_old(user.id, days=days)
    return {"message": f"Deleted {deleted} old notification(s)", "deletedCount": deleted}

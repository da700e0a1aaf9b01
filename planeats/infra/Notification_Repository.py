from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Tuple

from planeats.domain.Notification import Notification
from planeats.infra.Document_Store import DocumentRepository, paginate
from planeats.infra.paths import NOTIFICATIONS


class NotificationRepository(DocumentRepository):
    collection = NOTIFICATIONS
    model = Notification

    def list_for_user(self, user_id: str, read: Optional[bool] = None,
                      page: int = 1, limit: int = 10) -> Tuple[List[Notification], int, int]:
        docs = self.store.find(
            self.collection,
            lambda d: d.get('user') == user_id and (read is None or bool(d.get('read')) == read),
        )
        docs.sort(key=lambda d: d.get('createdAt') or '', reverse=True)
        page_docs, total, total_pages = paginate(docs, page, limit)
        return [Notification.from_dict(d) for d in page_docs], total, total_pages

    def count_unread(self, user_id: str) -> int:
        return self.store.count(self.collection, lambda d: d.get('user') == user_id and not d.get('read'))

    def mark_as_read(self, user_id: str, notification_ids: Optional[Iterable[str]] = None) -> int:
        """Mark the given (or all unread) notifications of a user as read; returns modified count."""
        wanted = set(notification_ids) if notification_ids else None
        modified = 0
        for notification in self.find(lambda d: d.get('user') == user_id and not d.get('read')):
            if wanted is not None and notification.id not in wanted:
                continue
            notification.read = True
            self.save(notification)
            modified += 1
        return modified

    def delete_for_user(self, notification_id: str, user_id: str) -> bool:
        notification = self.get(notification_id)
        if notification is None or notification.user != user_id:
            return False
        return self.delete(notification_id)

    def delete_old(self, user_id: str, days: int = 30, now: Optional[datetime] = None) -> int:
        '''Deletes read notifications older than ``days``.'''
        cutoff = ((now or datetime.now(timezone.utc)) - timedelta(days=days)).isoformat().replace('+00:00', 'Z')
        return self.store.delete_many(
            self.collection,
            lambda d: d.get('user') == user_id and d.get('read') and (d.get('createdAt') or '') < cutoff,
        )

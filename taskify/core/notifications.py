# taskify/core/notifications.py
from typing import List, Union

from taskify.core.auth import AuthService
from taskify.core.errors import InvalidFieldError, ItemNotFoundError
from taskify.core.models import NOTIFICATION_TYPES, Notification
from taskify.core.repositories import NotificationRepository


class NotificationCenter:
    """Notificações do usuário e o contador de não lidas."""

    def __init__(self, auth: AuthService, repository: NotificationRepository):
        self.auth = auth
        self.repository = repository
        self.notifications: List[Notification] = []

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self.notifications if not n.read)

    def fetch(self) -> List[Notification]:
        user_id = self.auth.current_user_id()
        if not user_id:
            self.notifications = []
            return self.notifications
        self.notifications = self.repository.list(user_id)
        return self.notifications

    def add(self, message: str, type: str = "system") -> Union[Notification, None]:
        if type not in NOTIFICATION_TYPES:
            raise InvalidFieldError("type", type)
        user_id = self.auth.require_user_id()
        notification = self.repository.insert(user_id, message, type)
        if notification:
            self.notifications.insert(0, notification)
        return notification

    def _find(self, notification_id: str) -> Notification:
        for notification in self.notifications:
            if notification.id == notification_id:
                return notification
        raise ItemNotFoundError(notification_id)

    def mark_as_read(self, notification_id: str) -> None:
        self.auth.require_user_id()
        notification = self._find(notification_id)
        if notification.read:
            return
        self.repository.mark_read(notification_id)
        notification.read = True

    def mark_all_as_read(self) -> None:
        user_id = self.auth.require_user_id()
        if self.unread_count == 0:
            return
        self.repository.mark_all_read(user_id)
        for notification in self.notifications:
            notification.read = True

    def delete(self, notification_id: str) -> None:
        self.auth.require_user_id()
        self._find(notification_id)
        self.repository.delete(notification_id)
        self.notifications = [n for n in self.notifications if n.id != notification_id]

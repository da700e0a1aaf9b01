from typing import Optional

from planeats.domain.User import User
from planeats.infra.Document_Store import DocumentRepository
from planeats.infra.paths import USERS


class UserRepository(DocumentRepository):
    collection = USERS
    model = User

    def find_by_username_or_email(self, username: str, email: str) -> Optional[User]:
        username_l = (username or '').strip().lower()
        email_l = (email or '').strip().lower()
        matches = self.find(
            lambda d: (d.get('username') or '').lower() == username_l
            or (d.get('email') or '').lower() == email_l
        )
        return matches[0] if matches else None

"""Website record store.

Every owner-facing operation looks records up by ``id`` and ``owner_id``
together, so a non-owner cannot tell a foreign website from a missing one.
The ``(owner_id, name)`` unique constraint is the final word on duplicate
names; the existence checks here only give a faster, friendlier error.
"""
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import User, Website
from app.utils.exceptions import (
    DuplicateNameError,
    ForbiddenError,
    InvalidInputError,
    is_duplicate_name_violation,
    not_found_error,
)
from app.utils.logger import logger
from app.utils.naming import base_default_name, probe_unique_name, validate_name


class WebsiteStore:
    """Website persistence bound to one database session."""

    def __init__(self, db: Session):
        self.db = db

    def _owned(self, website_id: str, owner_id: str) -> Website:
        website = self.db.query(Website).filter(
            Website.id == website_id,
            Website.owner_id == owner_id,
        ).first()
        if not website:
            raise not_found_error("Website")
        return website

    def name_taken(self, owner_id: str, name: str, exclude_id: Optional[str] = None) -> bool:
        query = self.db.query(Website.id).filter(
            Website.owner_id == owner_id,
            Website.name == name,
        )
        if exclude_id:
            query = query.filter(Website.id != exclude_id)
        return query.first() is not None

    def default_name(self, owner_id: str, today: Optional[date] = None) -> str:
        """Propose "My Website <date>", probing " (n)" suffixes on collision."""
        base = base_default_name(today or date.today())
        return probe_unique_name(base, lambda candidate: self.name_taken(owner_id, candidate))

    def create(self, owner_id: str, name: str, html: str, thumbnail: Optional[str] = None) -> Website:
        """
        Insert a new website.

        The name is stored as given; callers sanitise names that come from
        users (generated names keep their " (n)" suffix).

        Raises:
            InvalidInputError: If the name is empty
            DuplicateNameError: If the owner already uses the name
        """
        if not name or not name.strip():
            raise InvalidInputError("Website name is required")
        if self.name_taken(owner_id, name):
            raise DuplicateNameError()

        website = Website(owner_id=owner_id, name=name, html=html, thumbnail=thumbnail)
        self.db.add(website)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if not is_duplicate_name_violation(e):
                raise
            logger.info(f"[STORE] Unique constraint rejected name {name!r} for {owner_id}")
            raise DuplicateNameError()
        self.db.refresh(website)

        logger.info(f"[STORE] Created website {website.id} for {owner_id}")
        return website

    def list_by_owner(self, owner_id: str) -> List[Website]:
        return (
            self.db.query(Website)
            .filter(Website.owner_id == owner_id)
            .order_by(Website.created_at.desc())
            .all()
        )

    def rename(self, website_id: str, owner_id: str, new_name: str) -> Website:
        """
        Rename a website owned by owner_id.

        Raises:
            NotFoundError: If the owner has no such website
            InvalidInputError: If the name is invalid after sanitising
            DuplicateNameError: If another of the owner's websites uses the name
        """
        website = self._owned(website_id, owner_id)
        name = validate_name(new_name)

        if website.name == name:
            return website
        if self.name_taken(owner_id, name, exclude_id=website.id):
            raise DuplicateNameError()

        website.name = name
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if not is_duplicate_name_violation(e):
                raise
            raise DuplicateNameError()
        self.db.refresh(website)

        logger.info(f"[STORE] Renamed website {website_id}")
        return website

    def set_published(self, website_id: str, owner_id: str, value: bool) -> Website:
        website = self._owned(website_id, owner_id)
        if website.published != value:
            website.published = value
            self.db.commit()
            self.db.refresh(website)
            logger.info(f"[STORE] Website {website_id} published={value}")
        return website

    def delete(self, website_id: str, owner_id: str) -> None:
        website = self._owned(website_id, owner_id)
        self.db.delete(website)
        self._unlink(owner_id, [website_id])
        self.db.commit()
        logger.info(f"[STORE] Deleted website {website_id}")

    def delete_all_by_owner(self, owner_id: str) -> int:
        """
        Delete every website of an owner.

        Raises:
            NotFoundError: If the owner has no websites
        """
        ids = [row.id for row in self.db.query(Website.id).filter(Website.owner_id == owner_id).all()]
        if not ids:
            raise not_found_error("Websites")

        count = self.db.query(Website).filter(Website.owner_id == owner_id).delete(synchronize_session=False)
        self._unlink(owner_id, ids)
        self.db.commit()
        logger.info(f"[STORE] Deleted {count} websites for {owner_id}")
        return count

    def fetch_public(self, website_id: str, requester_identity_id: Optional[str] = None) -> str:
        """
        Return website HTML if it is published or requested by its owner.

        Raises:
            NotFoundError: If no website has this id
            ForbiddenError: If the website is private to someone else
        """
        website = self.db.query(Website).filter(Website.id == website_id).first()
        if not website:
            raise not_found_error("Website")
        if not website.published and website.owner_id != requester_identity_id:
            raise ForbiddenError("This website is not published")
        return website.html

    def link_to_user(self, owner_id: str, website_id: str) -> None:
        """Append a website id to the owner's forward list."""
        user = self.db.query(User).filter(User.identity_id == owner_id).first()
        if not user:
            raise not_found_error("User", owner_id)
        # Reassign so the JSON column is flagged as modified
        user.website_ids = list(user.website_ids or []) + [website_id]
        self.db.commit()

    def _unlink(self, owner_id: str, website_ids: List[str]) -> None:
        user = self.db.query(User).filter(User.identity_id == owner_id).first()
        if user and user.website_ids:
            removed = set(website_ids)
            user.website_ids = [wid for wid in user.website_ids if wid not in removed]

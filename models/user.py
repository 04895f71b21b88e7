"""
Provides the User model for the application's database schema.

Attributes
----------
name : sqlalchemy.Column
    Display name chosen at signup.
email : sqlalchemy.Column
    The email address of the user, which must be unique.
password : sqlalchemy.Column
    bcrypt hash of the user's password.

Relationships
-------------
conversations : sqlalchemy.orm.relationship
    Ordered one-to-many relationship with `ChatConversation`; new
    conversations are appended.
legacy_messages : sqlalchemy.orm.relationship
    Deprecated flat message history kept for backward compatibility.
"""

from sqlalchemy import Boolean, Column, String
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import relationship

from .base import BaseModel


class User(BaseModel):
    """
    Represents a user entity in the application.

    :ivar name: Display name of the user.
    :type name: str
    :ivar email: Email address of the user. It must be unique.
    :type email: str
    :ivar password: Password hash.
    :type password: str
    :ivar is_active: Indicates whether the user account is active.
    :type is_active: bool
    """

    __tablename__ = "users"

    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True)

    # Relationships
    conversations = relationship(
        "ChatConversation",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="ChatConversation.position",
        collection_class=ordering_list("position"),
    )

    # Kept for backward compatibility with the single-thread history
    legacy_messages = relationship(
        "LegacyChatMessage",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="LegacyChatMessage.position",
        collection_class=ordering_list("position"),
    )

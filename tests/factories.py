"""
Test data factories for generating test objects.

This module provides Factory Boy factories for building model instances
with realistic default values. Instances are transient; tests add them to
a session themselves when they need them persisted.
"""

import uuid

import factory

from app.core.security import hash_password
from models import ChatConversation, ChatMessage, LegacyChatMessage, MessageRole, User
from models.base import utcnow

DEFAULT_PASSWORD = "secret-password"


class UserFactory(factory.Factory):
    """Factory for creating User test instances."""

    class Meta:
        model = User

    id = factory.LazyFunction(uuid.uuid4)
    name = factory.Sequence(lambda n: f"Test User {n}")
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    password = factory.LazyFunction(lambda: hash_password(DEFAULT_PASSWORD))
    is_active = True
    created_at = factory.LazyFunction(utcnow)
    updated_at = factory.LazyAttribute(lambda o: o.created_at)


class ChatMessageFactory(factory.Factory):
    """Factory for conversation turns. Alternates user and assistant roles."""

    class Meta:
        model = ChatMessage

    id = factory.LazyFunction(uuid.uuid4)
    role = factory.Iterator([MessageRole.USER, MessageRole.ASSISTANT])
    content = factory.Sequence(lambda n: f"Message {n}")
    created_at = factory.LazyFunction(utcnow)
    updated_at = factory.LazyAttribute(lambda o: o.created_at)


class ChatConversationFactory(factory.Factory):
    """Factory for conversations, empty unless ``messages`` is given."""

    class Meta:
        model = ChatConversation

    id = factory.LazyFunction(uuid.uuid4)
    name = "New Conversation"
    is_deleted = False
    messages = factory.LazyFunction(list)
    created_at = factory.LazyFunction(utcnow)
    updated_at = factory.LazyAttribute(lambda o: o.created_at)


class LegacyChatMessageFactory(factory.Factory):
    """Factory for messages of the old flat history."""

    class Meta:
        model = LegacyChatMessage

    id = factory.LazyFunction(uuid.uuid4)
    role = MessageRole.USER
    content = factory.Faker("sentence")
    position = factory.Sequence(lambda n: n)
    created_at = factory.LazyFunction(utcnow)
    updated_at = factory.LazyAttribute(lambda o: o.created_at)

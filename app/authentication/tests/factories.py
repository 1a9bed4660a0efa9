"""
Factory Boy factories for authentication models.

Usage:
    from authentication.tests.factories import UserFactory, befriend

    alice = UserFactory(username="alice")
    bob = UserFactory(username="bob")
    befriend(alice, bob)
"""

import factory

from authentication.models import User


class UserFactory(factory.django.DjangoModelFactory):
    """
    Factory for User model.

    Examples:
        user = UserFactory()
        staff = UserFactory(is_staff=True)
        user = UserFactory(username="alice", password="secret")
    """

    class Meta:
        model = User
        skip_postgeneration_save = True

    username = factory.Sequence(lambda n: f"user{n}")
    display_name = factory.LazyAttribute(lambda o: o.username.title())
    is_active = True
    is_staff = False

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Override create to use UserManager.create_user()."""
        password = kwargs.pop("password", "TestPass123!")
        return model_class.objects.create_user(
            username=kwargs.pop("username"), password=password, **kwargs
        )


def befriend(user_a: User, user_b: User) -> None:
    """Write both directions of a friendship directly."""
    user_a.friends.add(user_b)
    user_b.friends.add(user_a)

from django.contrib.auth.models import AbstractUser
from django.contrib.auth.models import UserManager as DjangoUserManager
from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import AllObjectsManager, SoftDeleteModel


class Branch(SoftDeleteModel):
    """A physical branch. Every financial row belongs to one."""

    name = models.CharField(max_length=200)
    location = models.CharField(max_length=255, blank=True, default="")
    manager_name = models.CharField(max_length=150, blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name = _("Branch")
        verbose_name_plural = _("Branches")

    def __str__(self):
        return self.name


class UserManager(DjangoUserManager):
    """Default user manager. Soft-deleted users are invisible to login and JWT lookups."""

    use_in_migrations = False

    def get_queryset(self):
        return super().get_queryset().filter(is_deleted=False)

    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("role", User.Role.ADMIN)
        return super().create_superuser(username, email, password, **extra_fields)


class User(SoftDeleteModel, AbstractUser):
    class Role(models.TextChoices):
        ADMIN = "ADMIN", "Admin"
        ACCOUNTANT = "ACCOUNTANT", "Accountant"

    role = models.CharField(max_length=20, choices=Role.choices, default=Role.ACCOUNTANT)
    branch = models.ForeignKey(
        Branch,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="users",
    )
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()
    all_objects = AllObjectsManager()

    class Meta(AbstractUser.Meta):
        ordering = ["-date_joined"]
        swappable = "AUTH_USER_MODEL"

    def __str__(self):
        return self.username

    @property
    def is_admin_role(self) -> bool:
        return self.role == self.Role.ADMIN

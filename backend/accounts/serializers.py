from django.contrib.auth import authenticate
from django.utils.translation import gettext as _
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.tokens import RefreshToken

from .models import Branch, User


class BranchSerializer(serializers.ModelSerializer):
    users_count = serializers.SerializerMethodField()

    class Meta:
        model = Branch
        fields = (
            "id", "name", "location", "manager_name", "phone", "is_active",
            "users_count", "created_at", "updated_at",
        )
        read_only_fields = ("id", "users_count", "created_at", "updated_at")

    def get_users_count(self, obj):
        if hasattr(obj, "_users_count"):
            return obj._users_count
        return obj.users.filter(is_deleted=False).count()


class BranchBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Branch
        fields = ("id", "name", "location")


class BranchWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    location = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    manager_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    is_active = serializers.BooleanField(required=False, default=True)


class UserSerializer(serializers.ModelSerializer):
    branch = BranchBriefSerializer(read_only=True)

    class Meta:
        model = User
        fields = (
            "id", "username", "email", "role", "branch_id", "branch",
            "is_active", "is_deleted", "deleted_at", "date_joined", "updated_at",
        )
        read_only_fields = fields


class UserCreateSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(min_length=6, write_only=True)
    role = serializers.ChoiceField(choices=User.Role.choices, default=User.Role.ACCOUNTANT)
    branch_id = serializers.IntegerField(required=False, allow_null=True)
    email = serializers.EmailField(required=False, allow_blank=True, default="")


class UserUpdateSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150, required=False)
    password = serializers.CharField(min_length=6, write_only=True, required=False)
    role = serializers.ChoiceField(choices=User.Role.choices, required=False)
    branch_id = serializers.IntegerField(required=False, allow_null=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)


class AssignBranchSerializer(serializers.Serializer):
    branch_id = serializers.IntegerField(allow_null=True)


class LoginSerializer(serializers.Serializer):
    """
    Username/password login returning a simplejwt token pair.

    Raises AuthenticationFailed (401) on bad credentials or a disabled account.
    """
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        username = attrs["username"]
        password = attrs["password"]

        existing = User.all_objects.filter(username=username).first()
        if existing is not None and existing.check_password(password):
            if existing.is_deleted or not existing.is_active:
                raise AuthenticationFailed(_("Account is disabled"))

        user = authenticate(
            request=self.context.get("request"),
            username=username,
            password=password,
        )
        if not user:
            raise AuthenticationFailed(_("Invalid username or password"))

        refresh = RefreshToken.for_user(user)
        refresh["role"] = user.role
        refresh["branch_id"] = user.branch_id
        return {
            "refresh": str(refresh),
            "access": str(refresh.access_token),
            "user": ProfileSerializer(user).data,
        }


class ProfileSerializer(serializers.ModelSerializer):
    branch = BranchBriefSerializer(read_only=True)

    class Meta:
        model = User
        fields = ("id", "username", "email", "role", "branch_id", "branch", "is_active")
        read_only_fields = fields

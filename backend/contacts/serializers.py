from django.utils.translation import gettext as _
from rest_framework import serializers

from accounts.serializers import BranchBriefSerializer

from .models import Contact


class ContactSerializer(serializers.ModelSerializer):
    branch = BranchBriefSerializer(read_only=True)
    created_by_username = serializers.CharField(source="created_by.username", read_only=True, default=None)

    class Meta:
        model = Contact
        fields = (
            "id", "name", "type", "phone", "email", "address", "credit_limit", "notes",
            "is_active", "branch_id", "branch", "created_by", "created_by_username",
            "created_at", "updated_at",
        )
        read_only_fields = fields


class ContactDetailSerializer(ContactSerializer):
    payables_count = serializers.SerializerMethodField()
    receivables_count = serializers.SerializerMethodField()

    class Meta(ContactSerializer.Meta):
        fields = ContactSerializer.Meta.fields + ("payables_count", "receivables_count")
        read_only_fields = fields

    def get_payables_count(self, obj):
        return obj.payables.filter(is_deleted=False).count()

    def get_receivables_count(self, obj):
        return obj.receivables.filter(is_deleted=False).count()


class ContactCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    type = serializers.ChoiceField(choices=Contact.ContactType.choices, default=Contact.ContactType.SUPPLIER)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    email = serializers.EmailField(required=False, allow_blank=True, default="")
    address = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    credit_limit = serializers.DecimalField(max_digits=15, decimal_places=2, required=False, allow_null=True, min_value=0)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    branch_id = serializers.IntegerField(required=False, allow_null=True)

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError(_("Name is required."))
        return value


class ContactUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200, required=False)
    type = serializers.ChoiceField(choices=Contact.ContactType.choices, required=False)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    credit_limit = serializers.DecimalField(max_digits=15, decimal_places=2, required=False, allow_null=True, min_value=0)
    notes = serializers.CharField(required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)

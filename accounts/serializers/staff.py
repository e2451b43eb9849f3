# accounts/serializers/staff.py
from django.contrib.auth.hashers import make_password
from rest_framework import serializers

from accounts.constants import StaffRoles, UserRole
from accounts.models import User
from pricing.config import load_pricing_config


class StaffSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, required=False)

    class Meta:
        model = User
        fields = (
            "id",
            "username",
            "first_name",
            "last_name",
            "email",
            "phone",
            "role",
            "is_active",
            "password",
            "balance_usd",
            "balance_cup",
            "pending_balance",
            "commission_rate",
            "uses_logistics",
        )
        read_only_fields = ("id", "balance_usd", "balance_cup", "pending_balance")

    def validate_role(self, value):
        if value not in StaffRoles.MANAGED:
            raise serializers.ValidationError(
                "Rôle non autorisé : livreur ou revendeur uniquement."
            )
        return value

    def validate_commission_rate(self, value):
        if value < 0 or value > 100:
            raise serializers.ValidationError("Le taux doit être compris entre 0 et 100.")
        return value

    def create(self, validated_data):
        password = validated_data.pop("password", None)
        if not password:
            raise serializers.ValidationError(
                {"password": "Mot de passe obligatoire."}
            )

        if (
            validated_data.get("role") == UserRole.RESELLER
            and "commission_rate" not in validated_data
        ):
            validated_data["commission_rate"] = load_pricing_config().default_reseller_rate

        user = User(**validated_data)
        user.password = make_password(password)
        user.save()

        return user

    def update(self, instance, validated_data):
        password = validated_data.pop("password", None)

        for attr, value in validated_data.items():
            setattr(instance, attr, value)

        if password:
            instance.password = make_password(password)

        instance.save()
        return instance


class MeSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = (
            "id",
            "username",
            "first_name",
            "last_name",
            "email",
            "phone",
            "role",
            "balance_usd",
            "balance_cup",
            "pending_balance",
            "commission_rate",
            "uses_logistics",
        )
        read_only_fields = fields

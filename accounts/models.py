from decimal import Decimal

from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models
from django.db.models import Q

from accounts.constants import UserRole


class StaffUserManager(UserManager):

    def create_superuser(self, username, email=None, password=None, **extra_fields):
        # createsuperuser : administrateur, jamais livreur par défaut
        extra_fields.setdefault("role", UserRole.ADMIN)
        return super().create_superuser(username, email, password, **extra_fields)


class User(AbstractUser):
    """
    Utilisateur staff.

    Porte deux jeux d'attributs :
    - livreur : soldes espèces USD / CUP (projection du journal cash.CashMovement)
    - revendeur : commission en attente, taux personnel, logistique plateforme
    Les soldes ne sont jamais écrits directement : seuls les services
    cash.services et resellers.services les modifient.
    """

    role = models.CharField(max_length=20, choices=UserRole.CHOICES, default=UserRole.COURIER)
    phone = models.CharField(max_length=50, blank=True)

    objects = StaffUserManager()

    # =========================
    # LIVREUR
    # =========================
    balance_usd = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    balance_cup = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    # =========================
    # REVENDEUR
    # =========================
    pending_balance = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    commission_rate = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("2.00"))
    uses_logistics = models.BooleanField(default=True)

    class Meta:
        ordering = ["username"]
        constraints = [
            models.CheckConstraint(
                condition=Q(balance_usd__gte=0),
                name="user_balance_usd_non_negative",
            ),
            models.CheckConstraint(
                condition=Q(balance_cup__gte=0),
                name="user_balance_cup_non_negative",
            ),
            models.CheckConstraint(
                condition=Q(pending_balance__gte=0),
                name="user_pending_balance_non_negative",
            ),
        ]

    @property
    def is_admin(self):
        return self.is_superuser or self.role == UserRole.ADMIN

    @property
    def is_courier(self):
        return self.role == UserRole.COURIER and not self.is_superuser

    @property
    def is_reseller(self):
        return self.role == UserRole.RESELLER

    def balance_for(self, currency):
        if currency == "USD":
            return self.balance_usd
        if currency == "CUP":
            return self.balance_cup
        raise ValueError(f"Devise inconnue : {currency}")

    def __str__(self):
        return self.get_full_name() or self.username

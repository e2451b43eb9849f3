from datetime import timedelta
from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.test import TestCase
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied, ValidationError

from accounting.models import AccountingMovement, MovementKind
from accounts.constants import UserRole
from accounts.models import User
from cash.services import allocate
from core.exceptions import InvalidStateTransition
from disputes import services
from disputes.models import CommentKind, DisputeComment, DisputePriority, DisputeStatus, ResolutionType
from pricing.models import CommissionTier
from rates.models import ExchangeRate, RateSource
from remittances.services import lifecycle

ORDER = {
    "sender_name": "Ana Pérez",
    "sender_phone": "+13055550101",
    "beneficiary_name": "Luis Pérez",
    "beneficiary_phone": "+5355550101",
    "beneficiary_address": "Calle 23 #456, Vedado",
    "amount_sent": Decimal("100"),
    "delivery_type": "LOCAL",
}


class DisputeTestCase(TestCase):

    def setUp(self):
        self.admin = User.objects.create_user(username="admin", password="x", role=UserRole.ADMIN)
        self.courier = User.objects.create_user(username="livreur", password="x", role=UserRole.COURIER)
        self.reseller = User.objects.create_user(username="revendeur", password="x", role=UserRole.RESELLER)
        ExchangeRate.objects.create(
            base_currency="USD",
            quote_currency="CUP",
            rate=Decimal("435"),
            source=RateSource.MANUAL,
        )
        CommissionTier.objects.create(
            name="Standard",
            range_min=Decimal("0"),
            percentage=Decimal("3"),
            fixed_fee=Decimal("2"),
        )
        allocate(self.courier, "CUP", Decimal("500000"), actor=self.admin)

    def _delivered(self, reseller=None):
        remittance = lifecycle.create_remittance(ORDER, actor=self.admin, reseller=reseller)
        lifecycle.assign(remittance, self.courier, actor=self.admin)
        return lifecycle.deliver(remittance, actor=self.courier)

    def _open(self, **kwargs):
        remittance = kwargs.pop("remittance", None) or self._delivered()
        return services.open_dispute(
            remittance,
            kwargs.pop("kind", "NOT_DELIVERED"),
            "Le bénéficiaire n'a rien reçu.",
            actor=kwargs.pop("actor", self.admin),
            **kwargs,
        )

    # =========================
    # OUVERTURE
    # =========================

    def test_open_on_delivered_remittance(self):
        before = timezone.now()
        dispute = self._open()

        self.assertEqual(dispute.status, DisputeStatus.OPEN)
        self.assertTrue(dispute.number.startswith("DIS-"))
        # non reçue : priorité haute, 24 h
        self.assertEqual(dispute.priority, DisputePriority.HIGH)
        self.assertGreaterEqual(dispute.deadline, before + timedelta(hours=24))
        self.assertEqual(dispute.comments.get().kind, CommentKind.SYSTEM)

    def test_explicit_priority_wins(self):
        dispute = self._open(kind="MISCONDUCT", priority=DisputePriority.URGENT)

        self.assertEqual(dispute.priority, DisputePriority.URGENT)

    def test_pending_remittance_cannot_be_disputed(self):
        remittance = lifecycle.create_remittance(ORDER, actor=self.admin)

        with self.assertRaises(ValidationError):
            self._open(remittance=remittance)

    def test_reseller_disputes_only_own_remittances(self):
        own = self._delivered(reseller=self.reseller)
        other = self._delivered()

        dispute = self._open(remittance=own, actor=self.reseller)
        self.assertEqual(dispute.reported_by, self.reseller)

        with self.assertRaises(PermissionDenied):
            self._open(remittance=other, actor=self.reseller)
        with self.assertRaises(PermissionDenied):
            self._open(remittance=own, actor=self.courier)

    # =========================
    # TRAITEMENT
    # =========================

    def test_status_walk_is_checked(self):
        dispute = self._open()

        services.change_status(dispute, DisputeStatus.INVESTIGATING, actor=self.admin, note="Appel au livreur")
        services.change_status(dispute, DisputeStatus.AWAITING_CUSTOMER, actor=self.admin)

        with self.assertRaises(InvalidStateTransition):
            services.change_status(dispute, DisputeStatus.ESCALATED, actor=self.admin)
        with self.assertRaises(ValidationError):
            services.change_status(dispute, DisputeStatus.RESOLVED, actor=self.admin)

        dispute.refresh_from_db()
        self.assertEqual(dispute.status, DisputeStatus.AWAITING_CUSTOMER)
        self.assertEqual(
            DisputeComment.objects.filter(dispute=dispute, kind=CommentKind.STATUS_CHANGE).count(), 2
        )

    def test_assign_to_admin_only(self):
        dispute = self._open()

        services.assign_dispute(dispute, self.admin, actor=self.admin)
        dispute.refresh_from_db()
        self.assertEqual(dispute.assigned_to, self.admin)

        with self.assertRaises(ValidationError):
            services.assign_dispute(dispute, self.courier, actor=self.admin)

    # =========================
    # CLÔTURE
    # =========================

    def test_full_refund_books_expense(self):
        dispute = self._open()
        remittance = dispute.remittance

        dispute = services.resolve_dispute(
            dispute,
            actor=self.admin,
            resolution="Remise perdue, client remboursé.",
            resolution_type=ResolutionType.FULL_REFUND,
        )

        self.assertEqual(dispute.status, DisputeStatus.RESOLVED)
        self.assertEqual(dispute.refund_amount, remittance.total_charged)
        self.assertEqual(dispute.resolved_by, self.admin)
        expense = AccountingMovement.objects.get(kind=MovementKind.EXPENSE)
        self.assertEqual(expense.amount, remittance.total_charged)
        self.assertEqual(expense.remittance, remittance)
        self.assertIn(dispute.number, expense.concept)

    def test_partial_refund_is_capped(self):
        dispute = self._open()

        with self.assertRaises(ValidationError):
            services.resolve_dispute(
                dispute,
                actor=self.admin,
                resolution="Geste commercial",
                resolution_type=ResolutionType.PARTIAL_REFUND,
                refund_amount=Decimal("500"),
            )
        with self.assertRaises(ValidationError):
            services.resolve_dispute(
                dispute,
                actor=self.admin,
                resolution="Geste commercial",
                resolution_type=ResolutionType.PARTIAL_REFUND,
            )

        dispute.refresh_from_db()
        self.assertEqual(dispute.status, DisputeStatus.OPEN)
        self.assertFalse(AccountingMovement.objects.filter(kind=MovementKind.EXPENSE).exists())

        services.resolve_dispute(
            dispute,
            actor=self.admin,
            resolution="Geste commercial",
            resolution_type=ResolutionType.PARTIAL_REFUND,
            refund_amount=Decimal("20"),
        )
        self.assertEqual(
            AccountingMovement.objects.get(kind=MovementKind.EXPENSE).amount, Decimal("20.00")
        )

    def test_resolution_without_refund_books_nothing(self):
        dispute = self._open(kind="MISCONDUCT")

        with self.assertRaises(ValidationError):
            services.resolve_dispute(
                dispute,
                actor=self.admin,
                resolution="Rappel à l'ordre du livreur",
                resolution_type=ResolutionType.NO_ACTION,
                refund_amount=Decimal("5"),
            )

        dispute = services.resolve_dispute(
            dispute,
            actor=self.admin,
            resolution="Rappel à l'ordre du livreur",
            resolution_type=ResolutionType.NO_ACTION,
        )
        self.assertIsNone(dispute.refund_amount)
        self.assertFalse(AccountingMovement.objects.filter(kind=MovementKind.EXPENSE).exists())

    def test_closed_dispute_is_final(self):
        dispute = self._open()
        services.reject_dispute(dispute, actor=self.admin, resolution="Livraison confirmée par photo.")

        with self.assertRaises(InvalidStateTransition):
            services.resolve_dispute(
                dispute,
                actor=self.admin,
                resolution="x",
                resolution_type=ResolutionType.FULL_REFUND,
            )
        with self.assertRaises(InvalidStateTransition):
            services.change_status(dispute, DisputeStatus.INVESTIGATING, actor=self.admin)
        with self.assertRaises(ValidationError):
            services.assign_dispute(dispute, self.admin, actor=self.admin)

        dispute.refresh_from_db()
        self.assertEqual(dispute.status, DisputeStatus.REJECTED)
        self.assertEqual(dispute.resolution_type, ResolutionType.NO_ACTION)

    def test_dispute_does_not_touch_remittance_state(self):
        dispute = self._open()
        services.resolve_dispute(
            dispute,
            actor=self.admin,
            resolution="Remboursé",
            resolution_type=ResolutionType.FULL_REFUND,
        )

        dispute.remittance.refresh_from_db()
        self.assertEqual(dispute.remittance.state, "DELIVERED")

    # =========================
    # FIL D'ACTIVITÉ
    # =========================

    def test_only_admin_writes_internal_notes(self):
        dispute = self._open(remittance=self._delivered(reseller=self.reseller), actor=self.reseller)

        note = services.add_comment(dispute, self.reseller, "Le client confirme.", internal=True)
        self.assertFalse(note.internal)
        note = services.add_comment(dispute, self.admin, "Livreur injoignable.", internal=True)
        self.assertTrue(note.internal)

        with self.assertRaises(DjangoValidationError):
            note.delete()

    def test_stats_count_overdue(self):
        late = self._open()
        self._open(kind="MISCONDUCT")
        closed = self._open()
        services.reject_dispute(closed, actor=self.admin, resolution="Doublon")

        stats = services.dispute_stats(now=late.deadline + timedelta(hours=1))

        self.assertEqual(stats["active"], 2)
        self.assertEqual(stats["overdue"], 1)
        self.assertEqual(stats["by_status"][DisputeStatus.REJECTED], 1)
        self.assertEqual(stats["by_status"][DisputeStatus.OPEN], 2)

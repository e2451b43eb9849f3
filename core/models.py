from django.core.exceptions import ValidationError
from django.db import models


class AppendOnlyQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise ValidationError(
            f"{self.model._meta.verbose_name} : écriture en ajout seul, mise à jour interdite."
        )

    def delete(self):
        raise ValidationError(
            f"{self.model._meta.verbose_name} : écriture en ajout seul, suppression interdite."
        )


class AppendOnlyModel(models.Model):
    """
    Base des journaux (mouvements espèces, paiements revendeur,
    historique des taux, écritures comptables).

    Insertions uniquement : une correction est une nouvelle écriture.
    """

    objects = AppendOnlyQuerySet.as_manager()

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError(
                f"{self._meta.verbose_name} #{self.pk} est immuable."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            f"{self._meta.verbose_name} #{self.pk} ne peut pas être supprimé."
        )

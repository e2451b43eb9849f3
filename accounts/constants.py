# accounts/constants.py

class UserRole:
    ADMIN = "ADMIN"
    COURIER = "COURIER"
    RESELLER = "RESELLER"

    CHOICES = [
        (ADMIN, "Administrateur"),
        (COURIER, "Livreur"),
        (RESELLER, "Revendeur"),
    ]


class StaffRoles:
    # Rôles qu'un administrateur peut créer via l'API
    MANAGED = (
        UserRole.COURIER,
        UserRole.RESELLER,
    )

from django.contrib.auth.models import AbstractUser
from django.db import models
from rest_framework_simplejwt.tokens import RefreshToken

from .managers import UserManager


class User(AbstractUser):
    ROLES = (
        ("user", "User"),
        ("admin", "Admin"),
    )

    PREFERRED_LANGUAGES = (
        ("zh", "繁體中文"),
        ("en", "English"),
        ("pt", "Português"),
    )

    email = models.EmailField(unique=True)
    role = models.CharField(max_length=20, choices=ROLES, default="user", db_index=True)
    preferred_language = models.CharField(max_length=2, choices=PREFERRED_LANGUAGES, default="zh")
    username = models.CharField(max_length=150, unique=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["first_name", "last_name"]

    objects = UserManager()

    @property
    def is_admin(self):
        return self.is_staff or self.role == "admin"

    def save(self, *args, **kwargs):
        if not self.username:
            base_username = self.email.split("@")[0]
            self.username = base_username

            counter = 1
            original_username = self.username
            while (
                User.objects.filter(username=self.username)
                .exclude(id=self.id)
                .exists()
            ):
                self.username = f"{original_username}_{counter}"
                counter += 1

        super().save(*args, **kwargs)

    def tokens(self):
        refresh = RefreshToken.for_user(self)
        return {"refresh": str(refresh), "access": str(refresh.access_token)}

    def __str__(self):
        return f"{self.first_name} {self.last_name} - {self.get_role_display()}"

# Path: users/admin.py
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import CustomUser
from .forms import CustomUserCreationForm, CustomUserChangeForm


@admin.register(CustomUser)
class CustomUserAdmin(BaseUserAdmin):
    add_form = CustomUserCreationForm
    form = CustomUserChangeForm
    model = CustomUser

    list_display = ("username", "full_name", "role", "is_active", "is_staff")
    list_filter = ("role", "is_active", "is_staff")

    def _strip_fields(self, fieldsets, to_remove=("first_name", "last_name")):
        """
        Remove unwanted fields from any fieldset regardless of the set name.
        If a fieldset becomes empty, drop it.
        """
        new_sets = []
        for name, opts in fieldsets:
            fields = opts.get("fields", ())
            if isinstance(fields, (list, tuple)):
                flat = []
                for item in fields:
                    if isinstance(item, (list, tuple)):
                        flat.extend(item)
                    else:
                        flat.append(item)
                new_fields = tuple(f for f in flat if f not in to_remove)
                if new_fields:
                    new_sets.append((name, {**opts, "fields": new_fields}))
            else:
                new_sets.append((name, opts))
        return tuple(new_sets)

    def get_fieldsets(self, request, obj=None):
        if obj is None:
            return self.get_add_fieldsets(request)
        base = super().get_fieldsets(request, obj)
        base = self._strip_fields(base, to_remove=("first_name", "last_name"))
        return base + ((None, {"fields": ("full_name", "role")}),)

    def get_add_fieldsets(self, request):
        return (
            (None, {
                "classes": ("wide",),
                "fields": ("username", "password1", "password2", "full_name", "role", "is_active", "is_staff"),
            }),
        )

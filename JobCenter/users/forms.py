# PATH: /JobCenter/users/forms.py
from django import forms

from .models import CustomUser


# =====   create   user   =====
class CustomUserCreationForm(forms.ModelForm):
    password1 = forms.CharField(label="Password", widget=forms.PasswordInput())
    password2 = forms.CharField(label="Repeat password", widget=forms.PasswordInput())

    class Meta:
        model = CustomUser
        fields = ("username", "full_name", "role", "email")
        labels = {
            "full_name": "Full name",
        }
        error_messages = {
            "role": {"required": "Please choose a role."},
        }

    def clean(self):
        cleaned = super().clean()
        p1, p2 = cleaned.get("password1"), cleaned.get("password2")
        if p1 or p2:
            if p1 != p2:
                self.add_error("password2", "The two passwords do not match.")
        return cleaned

    def save(self, commit=True):
        user = super().save(commit=False)
        password = self.cleaned_data.get("password1")
        if password:
            user.set_password(password)
        if commit:
            user.save()
        return user


# =====   edit   user   =====
class CustomUserChangeForm(forms.ModelForm):
    password1 = forms.CharField(
        label="New password",
        widget=forms.PasswordInput(attrs={"placeholder": "Leave blank to keep the current password"}),
        required=False,
    )
    password2 = forms.CharField(
        label="Repeat new password",
        widget=forms.PasswordInput(),
        required=False,
    )

    class Meta:
        model = CustomUser
        fields = ("username", "full_name", "role", "email", "is_active")
        labels = {
            "full_name": "Full name",
            "is_active": "Active",
        }

    def clean(self):
        cleaned = super().clean()
        p1, p2 = cleaned.get("password1"), cleaned.get("password2")
        if p1 or p2:
            if p1 != p2:
                self.add_error("password2", "The new password and its repetition differ.")
        return cleaned

    def save(self, commit=True):
        user = super().save(commit=False)
        p1 = self.cleaned_data.get("password1")
        if p1:
            user.set_password(p1)
        if commit:
            user.save()
        return user

from __future__ import annotations

from django import forms
from django.contrib.auth.forms import ReadOnlyPasswordHashField

from .models import StaffMember


STAFF_FORM_FIELDS = [
    "employee_id",
    "first_name",
    "last_name",
    "email",
    "phone",
    "position",
    "department",
    "hire_date",
    "roles",
    "groups",
    "is_active",
    "is_staff",
]


class StaffMemberCreationForm(forms.ModelForm):
    password1 = forms.CharField(
        label="Password",
        widget=forms.PasswordInput,
        strip=False,
    )
    password2 = forms.CharField(
        label="Confirm password",
        widget=forms.PasswordInput,
        strip=False,
    )

    class Meta:
        model = StaffMember
        fields = STAFF_FORM_FIELDS
        widgets = {
            "roles": forms.CheckboxSelectMultiple,
            "groups": forms.CheckboxSelectMultiple,
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        hire_date = self.fields.get("hire_date")
        if hire_date:
            hire_date.widget = forms.DateInput(attrs={"type": "date"})
            hire_date.required = False

    def clean_employee_id(self):
        employee_id = self.cleaned_data["employee_id"].strip()
        if StaffMember.objects.filter(employee_id=employee_id).exists():
            raise forms.ValidationError("This employee id is already registered.")
        return employee_id

    def clean_password2(self):
        password1 = self.cleaned_data.get("password1")
        password2 = self.cleaned_data.get("password2")
        if password1 and password2 and password1 != password2:
            raise forms.ValidationError("Passwords do not match.")
        return password2

    def save(self, commit: bool = True):
        user = super().save(commit=False)
        user.set_password(self.cleaned_data["password1"])
        if commit:
            user.save()
            self.save_m2m()
        return user


class StaffMemberChangeForm(forms.ModelForm):
    password = ReadOnlyPasswordHashField(
        label="Password",
        help_text="Raw passwords are not stored. Use the reset form to change it.",
    )

    class Meta:
        model = StaffMember
        fields = [*STAFF_FORM_FIELDS, "password"]
        widgets = {
            "roles": forms.CheckboxSelectMultiple,
            "groups": forms.CheckboxSelectMultiple,
        }

    def clean_password(self):
        return self.initial.get("password")

    def clean_employee_id(self):
        employee_id = self.cleaned_data["employee_id"].strip()
        qs = StaffMember.objects.filter(employee_id=employee_id)
        if self.instance.pk:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise forms.ValidationError("This employee id is already registered.")
        return employee_id

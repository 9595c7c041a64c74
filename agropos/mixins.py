from django.contrib.auth.mixins import LoginRequiredMixin, UserPassesTestMixin
from django.http import JsonResponse


class StaffRequiredMixin(LoginRequiredMixin, UserPassesTestMixin):
    """Mixin that restricts access to authenticated staff users only."""

    raise_exception = False

    def test_func(self):
        user = self.request.user
        return bool(user and user.is_authenticated and user.is_staff)

    def handle_no_permission(self):
        user = getattr(self.request, "user", None)
        if user and user.is_authenticated:
            return JsonResponse({"error": "Staff access required."}, status=403)
        return JsonResponse({"error": "Authentication required."}, status=401)


class CapabilityRequiredMixin(StaffRequiredMixin):
    """Staff access narrowed to members holding a capability code."""

    required_capability: str | None = None

    def test_func(self):
        if not super().test_func():
            return False
        if not self.required_capability:
            return True
        user = self.request.user
        if getattr(user, "is_superuser", False):
            return True
        return user.has_capability(self.required_capability)

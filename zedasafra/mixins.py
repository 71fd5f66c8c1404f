from django.contrib.auth.mixins import LoginRequiredMixin
from django.urls import reverse_lazy

from users.services import ProducerIdentity, resolve_identity


class ProducerContextMixin(LoginRequiredMixin):
    """Restrict access to logged-in users and resolve their backend identity.

    Users without a producer account still get through; their ``identity`` is
    ``None`` and the panels skip every backend query.
    """

    login_url = reverse_lazy("users:login")
    raise_exception = False

    _identity_resolved = False
    _identity: ProducerIdentity | None = None

    @property
    def identity(self) -> ProducerIdentity | None:
        if not self._identity_resolved:
            self._identity = resolve_identity(getattr(self.request, "user", None))
            self._identity_resolved = True
        return self._identity

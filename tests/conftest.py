import json

import pytest
from django.core.cache import caches

from accounts.models import AdminAccount
from accounts.tokens import issue_for
from .factories import make_camp, make_donor, make_hospital


@pytest.fixture(autouse=True)
def _clear_caches():
    yield
    for alias in ("default", "otp"):
        caches[alias].clear()


@pytest.fixture
def donor(db):
    return make_donor()


@pytest.fixture
def other_donor(db):
    return make_donor(email="asha@example.com", name="Asha Patil", blood_group="A-", gender="Female")


@pytest.fixture
def hospital(db):
    return make_hospital()


@pytest.fixture
def unverified_hospital(db):
    return make_hospital(email="new@hospital.org", license_number="LIC-002", is_verified=False, name="New Clinic")


@pytest.fixture
def admin_account(db):
    admin = AdminAccount(email="admin@raktsetu.org", name="Platform Admin")
    admin.set_password("secret123")
    admin.save()
    return admin


@pytest.fixture
def camp(hospital):
    return make_camp(hospital)


@pytest.fixture
def auth():
    """Authorization header kwargs for the Django test client."""
    def _auth(identity):
        return {"HTTP_AUTHORIZATION": f"Bearer {issue_for(identity)}"}
    return _auth


@pytest.fixture
def api(client):
    """JSON helpers around the test client: api.post(url, data, **headers)."""
    class _Api:
        def _send(self, method, url, data=None, **headers):
            body = json.dumps(data) if data is not None else ""
            return getattr(client, method)(url, data=body, content_type="application/json", **headers)

        def get(self, url, **headers):
            return client.get(url, **headers)

        def post(self, url, data=None, **headers):
            return self._send("post", url, data, **headers)

        def patch(self, url, data=None, **headers):
            return self._send("patch", url, data, **headers)

        def delete(self, url, **headers):
            return self._send("delete", url, None, **headers)

    return _Api()


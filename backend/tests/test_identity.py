import pytest

from foodrescue.core.config import Settings
from foodrescue.repos.inmemory import InMemoryRepo
from foodrescue.services.identity import resolve_session, role_for_new_user

pytestmark = pytest.mark.anyio


@pytest.fixture
def cfg():
    return Settings(_env_file=None, admin_emails="Boss@Example.com, ,ops@example.com ")


def test_allow_list_parsing(cfg):
    assert cfg.admin_email_list == ["boss@example.com", "ops@example.com"]
    assert cfg.is_admin_email("  BOSS@example.COM ")
    assert not cfg.is_admin_email("someone@example.com")
    assert not cfg.is_admin_email(None)
    assert Settings(_env_file=None, admin_emails="").admin_email_list == []


def test_allow_list_seeds_role(cfg):
    assert role_for_new_user("ops@EXAMPLE.com", cfg) == "admin"
    assert role_for_new_user("donor@example.com", cfg) == "donor"


async def test_session_without_profile(cfg):
    repo = InMemoryRepo()
    user = await repo.create_user("new@example.com", "h", "donor")
    session = await resolve_session(repo, user, cfg)
    assert session.principal_id == user["id"]
    assert session.email == "new@example.com"
    assert session.is_admin is False
    assert session.role == "donor"
    assert session.donor is None


async def test_session_picks_up_profile(cfg):
    repo = InMemoryRepo()
    user = await repo.create_user("chef@example.com", "h", "donor")
    await repo.create_donor(user["id"], {"business_name": "Chef's"})
    session = await resolve_session(repo, user, cfg)
    assert session.donor["business_name"] == "Chef's"


async def test_admin_from_persisted_role_or_allow_list(cfg):
    repo = InMemoryRepo()
    staff = await repo.create_user("staff@example.com", "h", "admin")
    listed = await repo.create_user("boss@example.com", "h", "donor")  # added to the list after sign-up
    assert (await resolve_session(repo, staff, cfg)).is_admin
    assert (await resolve_session(repo, listed, cfg)).role == "admin"

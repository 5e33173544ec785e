import pytest

from tiffin.core.exceptions import Conflict, InvalidCredentials, InvalidInput, Unauthenticated
from tiffin.core.security import ROLE_ADMIN, ROLE_USER


async def test_register_stores_hash_and_issues_user_token(auth):
    user, token = await auth.register("asha@example.com", "s3cret", "Asha")

    assert user.id is not None
    assert user.name == "Asha"
    assert user.password_hash != "s3cret"

    claims = auth.verify_token(token)
    assert claims.id == user.id
    assert claims.email == "asha@example.com"
    assert claims.role == ROLE_USER
    assert claims.city is None


async def test_register_same_email_twice_conflicts(auth):
    await auth.register("asha@example.com", "s3cret")

    with pytest.raises(Conflict):
        await auth.register("asha@example.com", "other")


@pytest.mark.parametrize("email,password", [(None, "s3cret"), ("asha@example.com", None), ("", "")])
async def test_register_requires_email_and_password(auth, email, password):
    with pytest.raises(InvalidInput):
        await auth.register(email, password)


async def test_login_round_trip(auth):
    registered, _ = await auth.register("asha@example.com", "s3cret")
    user, token = await auth.login("asha@example.com", "s3cret")

    assert user.id == registered.id
    assert auth.verify_token(token).role == ROLE_USER


async def test_unknown_email_and_wrong_password_fail_identically(auth):
    await auth.register("asha@example.com", "s3cret")

    with pytest.raises(InvalidCredentials) as wrong_password:
        await auth.login("asha@example.com", "nope")
    with pytest.raises(InvalidCredentials) as unknown_user:
        await auth.login("ghost@example.com", "s3cret")

    assert str(wrong_password.value) == str(unknown_user.value) == "invalid credentials"
    assert wrong_password.value.status_code == unknown_user.value.status_code == 400


async def test_admin_login_embeds_city_scope(auth):
    await auth.create_admin("pune@mummatiffin.com", "pw", "Pune Desk", "Pune")

    admin, token = await auth.admin_login("pune@mummatiffin.com", "pw")
    claims = auth.verify_token(token)

    assert admin.city == "Pune"
    assert claims.role == ROLE_ADMIN
    assert claims.city == "Pune"


async def test_admin_login_failures_share_message(auth):
    await auth.create_admin("pune@mummatiffin.com", "pw", city="Pune")

    with pytest.raises(InvalidCredentials) as wrong_password:
        await auth.admin_login("pune@mummatiffin.com", "bad")
    with pytest.raises(InvalidCredentials) as unknown_admin:
        await auth.admin_login("nobody@mummatiffin.com", "pw")

    assert wrong_password.value.message == unknown_admin.value.message


async def test_customer_credentials_do_not_open_admin_login(auth):
    await auth.register("asha@example.com", "s3cret")

    with pytest.raises(InvalidCredentials):
        await auth.admin_login("asha@example.com", "s3cret")


async def test_create_admin_defaults_to_all_and_rejects_duplicates(auth):
    admin = await auth.create_admin("ops@mummatiffin.com", "pw")
    assert admin.city == "All"
    assert admin.name == ""

    with pytest.raises(Conflict):
        await auth.create_admin("ops@mummatiffin.com", "pw2", city="Delhi")
    with pytest.raises(InvalidInput):
        await auth.create_admin("ops2@mummatiffin.com", None)


async def test_list_admins_in_creation_order(auth):
    await auth.create_admin("a@mummatiffin.com", "pw", city="Delhi")
    await auth.create_admin("b@mummatiffin.com", "pw")

    admins = await auth.list_admins()
    assert [a.email for a in admins] == ["a@mummatiffin.com", "b@mummatiffin.com"]


def test_verify_token_rejects_garbage(auth):
    with pytest.raises(Unauthenticated):
        auth.verify_token("garbage")

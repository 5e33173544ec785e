import pytest

from tiffin.core.exceptions import InvalidInput
from tiffin.services.addresses import AddressBook


async def test_recent_is_newest_first_and_unfiltered(feed):
    await feed.post("Delhi kitchen opens late today", "Delhi")
    await feed.post("Pune: new dinner menu", "Pune")
    await feed.post("Holiday on Sunday")

    notifications = await feed.recent()

    assert [n.text for n in notifications] == [
        "Holiday on Sunday",
        "Pune: new dinner menu",
        "Delhi kitchen opens late today",
    ]
    assert [n.target_city for n in notifications] == ["All", "Pune", "Delhi"]


async def test_recent_respects_limit(feed):
    for i in range(5):
        await feed.post(f"notice {i}")

    latest = await feed.recent(limit=2)
    assert [n.text for n in latest] == ["notice 4", "notice 3"]


@pytest.mark.parametrize("text", [None, "", "   "])
async def test_post_requires_text(feed, text):
    with pytest.raises(InvalidInput):
        await feed.post(text, "Delhi")


async def test_address_book_keeps_ten_most_recent(session, customer):
    book = AddressBook(session)
    for i in range(12):
        await book.save(customer.id, name=f"Address {i}", city="Delhi")

    addresses = await book.recent(customer.id)
    assert len(addresses) == 10
    assert addresses[0].name == "Address 11"
    assert addresses[-1].name == "Address 2"


async def test_address_book_fills_blank_fields(session, customer):
    book = AddressBook(session)
    address = await book.save(customer.id, line="12 MG Road")

    assert address.name == ""
    assert address.pin == ""
    assert address.city == ""

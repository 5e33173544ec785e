"""
Default Data

Creates the default administrators on every start (when missing) and, on an
empty menu, the sample dishes plus a welcome notification.
"""

import logging

from sqlalchemy import select

from tiffin.core.config import Settings
from tiffin.models import ALL_CITIES, Admin, MenuItem
from tiffin.services.auth import Authenticator
from tiffin.services.notifications import NotificationFeed

logger = logging.getLogger(__name__)

SAMPLE_MENU = [
    {
        "id": "b1", "meal": "breakfast", "price": 60, "city": "Delhi",
        "name_en": "Aloo Paratha + Curd", "name_hi": "आलू पराठा + दही",
        "description_en": "Hearty potato paratha", "description_hi": "मज़ेदार आलू पराठा",
        "available_from": "06:00", "available_to": "09:00",
    },
    {
        "id": "b2", "meal": "breakfast", "price": 45, "city": "Pune",
        "name_en": "Poha + Tea", "name_hi": "पोहा + चाय",
        "description_en": "Light & tasty poha", "description_hi": "हल्का और स्वादिष्ट पोहा",
        "available_from": "06:30", "available_to": "09:00",
    },
    {
        "id": "l1", "meal": "lunch", "price": 85, "city": ALL_CITIES,
        "name_en": "Dal + Roti + Sabzi", "name_hi": "दाल + रोटी + सब्ज़ी",
        "description_en": "Balanced vegetarian meal", "description_hi": "संतुलित शाकाहारी भोजन",
        "available_from": "11:00", "available_to": "14:00",
    },
    {
        "id": "d1", "meal": "dinner", "price": 70, "city": ALL_CITIES,
        "name_en": "Khichdi + Papad", "name_hi": "खिचड़ी + पापड़",
        "description_en": "Comforting khichdi", "description_hi": "आरामदेह खिचड़ी",
        "available_from": "18:00", "available_to": "20:00",
    },
]

WELCOME_TEXT = "Welcome to Mumma Tiffin! Live notifications enabled."


async def seed_defaults(auth: Authenticator, settings: Settings) -> None:
    db = auth.db
    default_admins = [
        (settings.default_admin_email, settings.default_admin_password, "Super Admin", ALL_CITIES),
        (settings.default_manager_email, settings.default_manager_password, "City Manager",
         settings.default_manager_city),
    ]
    for email, password, name, city in default_admins:
        existing = await db.execute(select(Admin.id).where(Admin.email == email))
        if existing.scalar_one_or_none() is None:
            await auth.create_admin(email, password, name, city)
            logger.info(f"Created admin {email}")
        else:
            logger.info(f"Admin exists {email}")

    any_menu = await db.execute(select(MenuItem.id).limit(1))
    if any_menu.scalar_one_or_none() is None:
        db.add_all(MenuItem(active=True, **item) for item in SAMPLE_MENU)
        await db.commit()
        await NotificationFeed(db).post(WELCOME_TEXT, ALL_CITIES)
        logger.info("Inserted sample menu and welcome notification")

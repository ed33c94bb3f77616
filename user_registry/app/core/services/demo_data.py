"""Demo user records for local development and manual testing."""

import random
import re
import unicodedata

from loguru import logger

from user_registry.app.core.services.store.base import UserStore
from user_registry.app.entities.core.user import UserFields
from user_registry.app.runtime.config.config_data import DemoDataConfig

BASELINE_USERS = (
    UserFields(
        name="Kajsa Anka",
        address="Vägen 13, 67421 Staden",
        email="kajsa@acme.org",
        telephone="070-0701100",
    ),
    UserFields(
        name="Kalle Anka",
        address="Vägen 31, 67422 Staden",
        email="kalle@acme.org",
        telephone="070-0702200",
    ),
)

FIRST_NAMES = (
    "Alice", "Bob", "Kalle", "Knatte", "Fnatte", "Tjatte", "Annika", "Amanda",
    "Frida", "Alex", "Sofia", "Emma", "Oliver", "Ida", "Hugo", "Elsa", "Tobias",
    "Ben", "Lucas", "Liam", "Klara", "Noah", "Wilma", "Adam", "Vera", "Emil",
    "Agnes", "Oscar", "Måns", "François", "Søren", "Jean-Pierre",
)

LAST_NAMES = (
    "Anka", "Ludd", "Pigg", "Andersson", "Johansson", "Karlsson", "Nilsson",
    "Eriksson", "Larsson", "Olsson", "Persson", "Svensson", "Gustafsson",
    "Pettersson", "Jonsson", "Jansson", "Hansson", "Bengtsson", "Jönsson",
    "Lindberg", "Frantzén", "Ziębównski", "O'Connor", "Müller",
)

STREETS = (
    "Sveavägen", "Fiskvägen", "Odengatan", "S:t Eriksgatan", "Skogsbacken",
    "Tre Kronors väg", "Hamngatan", "Lugnets Allé", "Mjölnarvägen",
)

CITIES = (
    "Stockholm", "Göteborg", "Malmö", "Uppsala", "Västerås", "Örebro",
    "Linköping", "Helsingborg", "Jönköping", "Norrköping",
)

EMAIL_DOMAIN = "example.com"

# Anything but word characters, dots and dashes is dropped from the local part
_DISALLOWED_LOCAL_CHARS = re.compile(r"[^\w.-]", re.ASCII)


def email_local_part(first_name: str, last_name: str) -> str:
    """ASCII ``first.last`` with diacritics stripped (``Måns`` -> ``mans``)."""
    decomposed = unicodedata.normalize("NFD", f"{first_name}.{last_name}".lower())
    without_marks = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _DISALLOWED_LOCAL_CHARS.sub("", without_marks)


def generate_demo_users(count: int, seed: int | None = None) -> list[UserFields]:
    """Generate ``count`` random users with distinct email addresses."""
    rng = random.Random(seed)
    taken: dict[str, int] = {}
    users = []

    for _ in range(count):
        first_name = rng.choice(FIRST_NAMES)
        last_name = rng.choice(LAST_NAMES)

        street = rng.choice(STREETS)
        street_number = rng.randint(1, 99)
        postal_code = rng.randint(10000, 99999)
        city = rng.choice(CITIES)

        local = email_local_part(first_name, last_name)
        seen = taken.get(local, 0)
        taken[local] = seen + 1
        if seen:
            local = f"{local}{seen + 1}"

        users.append(
            UserFields(
                name=f"{first_name} {last_name}",
                address=f"{street} {street_number}, {postal_code} {city}",
                email=f"{local}@{EMAIL_DOMAIN}",
                telephone=f"070-{rng.randint(0, 9_999_999):07d}",
            )
        )

    return users


def seed_demo_data(store: UserStore, config: DemoDataConfig) -> int:
    """Fill an empty store with the baseline pair plus ``config.count`` generated users.

    Returns:
        Number of users created (0 if the store already held data)
    """
    if store.count() > 0:
        logger.info("Store already contains users; skipping demo data")
        return 0

    created = 0
    for fields in (*BASELINE_USERS, *generate_demo_users(config.count, config.seed)):
        store.create(fields)
        created += 1

    logger.info("Generated {} demo users", created)
    return created

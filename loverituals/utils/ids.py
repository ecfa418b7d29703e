# loverituals/utils/ids.py
# Random identifiers for share links and internal records

from __future__ import annotations

import secrets

from loverituals.constants import (
    CATEGORY_ID_PREFIX,
    CONFIG_ID_PREFIX,
    RECORD_ID_ALPHABET,
    SHARE_ID_ALPHABET,
)


def generate_short_id(length: int, alphabet: str = SHARE_ID_ALPHABET) -> str:
    """Generate a random id of `length` characters drawn uniformly from `alphabet`."""
    return ''.join(secrets.choice(alphabet) for _ in range(length))


class IdentifierGenerator:
    """Produces share ids and prefixed record ids.

    Share ids are short enough to collide now and then; callers that need
    uniqueness rely on the storage constraint and retry with a fresh id.
    """

    def __init__(self, share_id_length: int = 12, record_id_length: int = 24):
        if share_id_length < 1 or record_id_length < 1:
            raise ValueError("identifier lengths must be positive")
        self.share_id_length = share_id_length
        self.record_id_length = record_id_length

    def generate_share_id(self) -> str:
        return generate_short_id(self.share_id_length, SHARE_ID_ALPHABET)

    def generate_record_id(self) -> str:
        return CONFIG_ID_PREFIX + generate_short_id(self.record_id_length, RECORD_ID_ALPHABET)

    def generate_category_id(self) -> str:
        return CATEGORY_ID_PREFIX + generate_short_id(self.record_id_length, RECORD_ID_ALPHABET)

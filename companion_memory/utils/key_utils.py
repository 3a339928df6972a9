"""
Storage key derivation for conversation threads.
"""

from ..models.core import CompanionKey

KEY_DELIMITER = '-'


def derive_history_key(key: CompanionKey) -> str:
    """Derive the short-term history key for a conversation.

    The result is "{companion_name}-{model_name}-{user_id}". Two keys differing in any
    field map to different strings as long as no field contains the delimiter itself.

    Args:
        key: Validated companion key

    Returns:
        Storage key string
    """
    return KEY_DELIMITER.join((key.companion_name, key.model_name, key.user_id))

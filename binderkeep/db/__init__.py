from binderkeep.db.database import get_session, init_db
from binderkeep.db.operations import (
    add_cards,
    create_tracked_set,
    delete_tracked_set,
    get_account,
    get_card,
    get_card_api_ids,
    get_or_create_account,
    get_tracked_set,
    get_tracked_set_by_api_id,
    list_all_tracked_sets,
    list_cards,
    list_tracked_sets,
    recount_collected_cards,
    set_card_collected,
)

__all__ = [
    "add_cards",
    "create_tracked_set",
    "delete_tracked_set",
    "get_account",
    "get_card",
    "get_card_api_ids",
    "get_or_create_account",
    "get_session",
    "get_tracked_set",
    "get_tracked_set_by_api_id",
    "init_db",
    "list_all_tracked_sets",
    "list_cards",
    "list_tracked_sets",
    "recount_collected_cards",
    "set_card_collected",
]

from .columns import DONE_COLUMN_NAME, find_column, get_initial_column, is_terminal_column, sort_columns
from .filters import TicketFilters, filter_tickets, matches_filters, merge_filters
from .sorting import sort_tickets
from .tags import add_tag_to_list, has_tag, normalize_tag, normalize_tags, remove_tag_from_list
from .ticket_key import TicketKey, generate_ticket_key, parse_ticket_key

__all__ = [
    "DONE_COLUMN_NAME",
    "find_column",
    "get_initial_column",
    "is_terminal_column",
    "sort_columns",
    "TicketFilters",
    "filter_tickets",
    "matches_filters",
    "merge_filters",
    "sort_tickets",
    "add_tag_to_list",
    "has_tag",
    "normalize_tag",
    "normalize_tags",
    "remove_tag_from_list",
    "TicketKey",
    "generate_ticket_key",
    "parse_ticket_key",
]

# Hidden sub-collection every collection owns; cards without a real
# sub-collection point at it.
NULL_SUB_COLLECTION_NAME = '- None -'

DEFAULT_COLLECTION_NAME = 'Default'

EXPORT_INDENT = 2

FORMAT_ALIASES = {
    'jpeg': ['jpg', 'jpeg'],
}

# User-facing messages
DUPLICATE_CARD_MSG = "A card with this question and answer already exists in this sub-collection."
EMPTY_COLLECTION_NAME_MSG = "Collection name cannot be empty"
EMPTY_SUB_COLLECTION_NAME_MSG = "Sub collection name cannot be empty"
RESERVED_NAME_MSG = "That name is reserved for internal use."
INVALID_DESTINATION_MSG = "Specify an existing collection or a new collection name"

from prometheus_client import Counter

DOCUMENT_TRANSITIONS = Counter(
    "doctrack_document_transitions_total",
    "Document lifecycle transitions applied",
    ["action"],
)

NOTIFICATIONS_CREATED = Counter(
    "doctrack_notifications_created_total",
    "In-app notifications stored after transitions",
)

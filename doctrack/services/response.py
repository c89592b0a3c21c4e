class ListResponseMixin:
    """Adds ``list_response`` to service classes exposing ``list``.

    ``list`` must take ``limit`` and ``offset`` as its last two arguments.
    """

    @classmethod
    def list_response(cls, db, *args):
        items = cls.list(db, *args)
        limit, offset = args[-2], args[-1]
        return {
            "items": items,
            "count": len(items),
            "limit": limit,
            "offset": offset,
        }

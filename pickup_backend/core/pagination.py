# core/pagination.py

"""
LIST PAGINATION

?page=<n>&size=<m> on every paginated list. The page body lands inside
the envelope's `data`:

    {"count": 42, "next": "...", "previous": null, "results": [...]}
"""

from django.conf import settings
from rest_framework.pagination import PageNumberPagination


class PageSizePagination(PageNumberPagination):
    page_size_query_param = "size"

    @property
    def max_page_size(self):
        return settings.MAX_PAGE_SIZE

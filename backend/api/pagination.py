from __future__ import annotations

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class EnvelopePagination(PageNumberPagination):
    """Pagination ``?page=&limit=`` renvoyant ``{meta: {total, perPage, currentPage, lastPage}, data}``."""

    page_size = 20
    page_query_param = "page"
    page_size_query_param = "limit"
    max_page_size = 200

    def get_paginated_response(self, data):
        paginator = self.page.paginator
        return Response(
            {
                "success": True,
                "data": {
                    "meta": {
                        "total": paginator.count,
                        "perPage": paginator.per_page,
                        "currentPage": self.page.number,
                        "lastPage": paginator.num_pages,
                    },
                    "data": data,
                },
            }
        )

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "properties": {
                "success": {"type": "boolean"},
                "data": {
                    "type": "object",
                    "properties": {
                        "meta": {
                            "type": "object",
                            "properties": {
                                "total": {"type": "integer"},
                                "perPage": {"type": "integer"},
                                "currentPage": {"type": "integer"},
                                "lastPage": {"type": "integer"},
                            },
                        },
                        "data": schema,
                    },
                },
            },
        }

"""PostgREST adapter – full-text institution data source."""
from campus_search.adapters.postgrest.data_source import (
    PostgRESTDataSource,
    constraint_param,
    parse_content_range,
)

__all__ = ["PostgRESTDataSource", "constraint_param", "parse_content_range"]

"""Search parsing, ranking and formatting components"""

from .query_parser import SearchQueryParser, parse_search_query
from .ranker import SearchRanker
from .formatter import format_search_results, report_title

__all__ = [
    'SearchQueryParser',
    'parse_search_query',
    'SearchRanker',
    'format_search_results',
    'report_title',
]

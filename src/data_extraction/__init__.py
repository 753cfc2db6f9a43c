"""Static-data extraction: locate, parse and merge UI sample data."""

from src.data_extraction.array_locator import ArrayLiteralLocator
from src.data_extraction.extractor import DataExtractor
from src.data_extraction.import_resolver import ImportResolver, extract_local_imports
from src.data_extraction.literal_parser import LiteralParser, evaluate_array, parse_literal
from src.data_extraction.project_walker import ProjectWalker
from src.data_extraction.record_merger import merge_records, merge_tables

__all__ = [
    "ArrayLiteralLocator",
    "DataExtractor",
    "ImportResolver",
    "LiteralParser",
    "ProjectWalker",
    "evaluate_array",
    "extract_local_imports",
    "merge_records",
    "merge_tables",
    "parse_literal",
]

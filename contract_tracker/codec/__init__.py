"""Row codec between spreadsheet rows and contract records."""
from contract_tracker.codec.rows import decode_row, encode_row, format_date, parse_number

__all__ = ["decode_row", "encode_row", "format_date", "parse_number"]

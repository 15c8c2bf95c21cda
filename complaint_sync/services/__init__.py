"""Services - stateless transformations shared by the application layer"""

from .response_normalizer import (
    ResponseNormalizer,
    FieldChain,
    RawRecord,
    CanonicalRecord,
    UnrecognizedRecord,
    classify_record,
    resolve_envelope,
    map_status,
    parse_datetime,
    id_text,
)

__all__ = [
    "ResponseNormalizer",
    "FieldChain",
    "RawRecord",
    "CanonicalRecord",
    "UnrecognizedRecord",
    "classify_record",
    "resolve_envelope",
    "map_status",
    "parse_datetime",
    "id_text",
]

ERRORS = {
  "E_LAYOUT_MISSING": "Required file or directory missing",
  "E_CRC_MISMATCH": "Record CRC does not match its contents",
  "E_MALFORMED_RECORD": "Record length field is invalid",
  "E_IO": "Segment file could not be read",
}

WARNINGS = {
  "W_TRUNCATED_RECORD": "Segment ends with a partially written record",
}

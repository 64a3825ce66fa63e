from pathlib import Path
from kru_core.checksum import record_checksum
from kru_core.codec import decode_next
from kru_core.errors import MalformedRecordError, TruncatedRecordError
from kru_core.protocol import META_PROPERTIES
from kru_update.walker import DirectoryWalker
from .const import ERRORS, WARNINGS

def _result(errors: list, warnings: list, records: int, segments: int) -> dict:
    return {
        "status": "FAIL" if errors else "PASS",
        "error_count": len(errors),
        "errors": errors,
        "warnings": warnings,
        "records": records,
        "segments": segments,
    }

def _check_segment(path: Path, errors: list, warnings: list) -> int:
    """Read-only pass over one segment; returns the number of complete records."""
    records = 0
    try:
        with open(path, "rb") as f:
            while True:
                try:
                    record = decode_next(f)
                except TruncatedRecordError as e:
                    warnings.append({"code":"W_TRUNCATED_RECORD","message":WARNINGS["W_TRUNCATED_RECORD"],"path":str(path),"position":e.position})
                    break
                except MalformedRecordError as e:
                    errors.append({"code":"E_MALFORMED_RECORD","message":ERRORS["E_MALFORMED_RECORD"],"path":str(path),"detail":str(e)})
                    break
                if record is None:
                    break
                records += 1
                # A bad CRC does not break framing, so keep going and report every one.
                computed = record_checksum(record)
                if computed != record.checksum:
                    errors.append({"code":"E_CRC_MISMATCH","message":ERRORS["E_CRC_MISMATCH"],"path":str(path),
                                   "offset":record.offset,"position":record.position,"expected":computed,"found":record.checksum})
    except OSError as e:
        errors.append({"code":"E_IO","message":ERRORS["E_IO"],"path":str(path),"detail":str(e)})
    return records

def verify_segment(path: Path) -> dict:
    path = Path(path)
    errors, warnings = [], []
    if not path.is_file():
        errors.append({"code":"E_LAYOUT_MISSING","message":ERRORS["E_LAYOUT_MISSING"],"path":str(path)})
        return _result(errors, warnings, 0, 0)
    records = _check_segment(path, errors, warnings)
    return _result(errors, warnings, records, 1)

def verify_data_dir(data_dir: Path) -> dict:
    data_dir = Path(data_dir)
    errors, warnings = [], []
    if not (data_dir / META_PROPERTIES).exists():
        errors.append({"code":"E_LAYOUT_MISSING","message":ERRORS["E_LAYOUT_MISSING"],"path":str(data_dir / META_PROPERTIES)})
        return _result(errors, warnings, 0, 0)

    records = 0
    segments = 0
    for ref in DirectoryWalker(data_dir).iter_segments():
        segments += 1
        records += _check_segment(ref.path, errors, warnings)
    return _result(errors, warnings, records, segments)

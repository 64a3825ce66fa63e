import sys
from pathlib import Path

from kru_core.protocol import CRC_POS, HEAD_LEN

def main():
    if len(sys.argv) != 2:
        print("Usage: corrupt_one_byte.py <segment.log>")
        raise SystemExit(2)

    p = Path(sys.argv[1])
    b = bytearray(p.read_bytes())
    if len(b) < HEAD_LEN:
        print("File too small to corrupt safely.")
        raise SystemExit(2)

    # Flip the last byte of the first record's CRC field.
    # Framing stays intact; only CRC verification can notice.
    idx = CRC_POS + 3
    b[idx] ^= 0x01
    p.write_bytes(bytes(b))
    print(f"Corrupted 1 byte at offset {idx} in {p}")

if __name__ == "__main__":
    main()

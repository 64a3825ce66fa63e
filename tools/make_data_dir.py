import json
import random
import uuid
from datetime import datetime, timezone
from pathlib import Path

from kru_core.codec import encode_record
from kru_core.protocol import META_PROPERTIES, MAGIC_V1

# --- CONFIGURATION ---
TOPICS = ["customers", "orders"]
PARTITIONS = 2
RECORDS_PER_SEGMENT = 5
SEGMENT_NAME = "00000000000000000000.log"
CRASH_CUT_BYTES = 3

NAMES = ["alice", "bob", "carol", "dave", "erin", "frank"]


def make_value(rng: random.Random, offset: int) -> bytes:
    doc = {
        "id": offset,
        "name": rng.choice(NAMES),
        "email": f"{rng.choice(NAMES)}@example.com",
        "amount": round(rng.uniform(1, 500), 2),
    }
    return json.dumps(doc, sort_keys=True, separators=(",", ":")).encode("utf-8")


def write_segment(path: Path, rng: random.Random, records: int, magic: int) -> None:
    now_ms = int(datetime.now(timezone.utc).timestamp() * 1000)
    with open(path, "wb") as f:
        for offset in range(records):
            # Every third record has no key, like a producer without partitioning key.
            key = None if offset % 3 == 2 else f"user-{offset}".encode("utf-8")
            f.write(encode_record(offset, key, make_value(rng, offset), magic=magic, timestamp=now_ms + offset))


def generate_data_dir(out_dir: str, crash: bool = False, magic: int = MAGIC_V1, seed: int = 0) -> Path:
    rng = random.Random(seed)
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    (out / META_PROPERTIES).write_text(
        f"version=0\nbroker.id=0\ncluster.id={uuid.UUID(int=rng.getrandbits(128))}\n", encoding="utf-8"
    )
    # Not a partition directory; must be ignored by the walker.
    (out / "cleaner-offset-checkpoint").write_text("0\n0\n", encoding="utf-8")

    for topic in TOPICS:
        for partition in range(PARTITIONS):
            p = out / f"{topic}-{partition}"
            p.mkdir(exist_ok=True)
            write_segment(p / SEGMENT_NAME, rng, RECORDS_PER_SEGMENT, magic)
            (p / SEGMENT_NAME.replace(".log", ".index")).write_bytes(b"")

    if crash:
        # Unclean shutdown: the last record of the first segment is cut short.
        seg = out / f"{TOPICS[0]}-0" / SEGMENT_NAME
        b = seg.read_bytes()
        seg.write_bytes(b[:-CRASH_CUT_BYTES])

    print(f"GENERATED: {out}")
    return out


if __name__ == "__main__":
    import sys

    # Usage:
    #   python tools/make_data_dir.py OUT_DIR [--crash] [--magic 0|1] [--seed N]

    args = [a for a in sys.argv[1:] if a]

    def pop_flag(arg_list: list[str], flag: str) -> tuple[bool, list[str]]:
        """Remove a boolean flag from an argv-style list."""
        if flag in arg_list:
            return True, [a for a in arg_list if a != flag]
        return False, arg_list

    def pop_int(arg_list: list[str], flag: str, default: int) -> tuple[int, list[str]]:
        if flag not in arg_list:
            return default, arg_list
        i = arg_list.index(flag)
        if i + 1 >= len(arg_list):
            raise SystemExit(f"{flag} requires a value")
        return int(arg_list[i + 1]), arg_list[:i] + arg_list[i + 2:]

    crash, args = pop_flag(args, "--crash")
    magic, args = pop_int(args, "--magic", MAGIC_V1)
    seed, args = pop_int(args, "--seed", 0)

    out = args[0] if len(args) > 0 else "kafka_data"
    generate_data_dir(out, crash=crash, magic=magic, seed=seed)

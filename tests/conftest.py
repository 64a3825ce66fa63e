from pathlib import Path

import pytest

from kru_core.codec import encode_record
from kru_core.protocol import CRC_POS, META_PROPERTIES

SEGMENT_NAME = "00000000000000000000.log"


def corrupt_crc(path: Path, record_position: int = 0) -> None:
    b = bytearray(path.read_bytes())
    b[record_position + CRC_POS + 3] ^= 0x01
    path.write_bytes(bytes(b))


def sample_records(n: int = 2, magic: int = 1) -> list[bytes]:
    return [
        encode_record(i, f"key-{i}".encode(), f'{{"n":{i}}}'.encode(), magic=magic, timestamp=1_700_000_000_000 + i)
        for i in range(n)
    ]


@pytest.fixture
def make_segment(tmp_path):
    def make(*records: bytes, directory: Path | None = None, name: str = SEGMENT_NAME) -> Path:
        d = directory or tmp_path
        d.mkdir(parents=True, exist_ok=True)
        path = d / name
        path.write_bytes(b"".join(records))
        return path

    return make


@pytest.fixture
def make_data_dir(tmp_path, make_segment):
    def make(partitions: dict[str, list[bytes]], meta: bool = True) -> Path:
        data = tmp_path / "data"
        data.mkdir(exist_ok=True)
        if meta:
            (data / META_PROPERTIES).write_text("version=0\nbroker.id=0\n", encoding="utf-8")
        for name, records in partitions.items():
            make_segment(*records, directory=data / name)
        return data

    return make

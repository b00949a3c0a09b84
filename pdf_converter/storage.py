import re
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from .models import ConversionResult

_UNSAFE_CHARS = re.compile(r"[^\w.-]+")


@dataclass
class ConversionPaths:
    document_id: str
    conversion_id: str
    conversion_dir: Path
    upload_file: Path
    work_dir: Path
    result_file: Path


def document_id_for(file_name: str) -> str:
    stem = Path(file_name or "").stem
    return _UNSAFE_CHARS.sub("_", stem).strip("._") or "document"


class ConversionStorage:
    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)

    def build_paths(self, source_file: str, conversion_id: str) -> ConversionPaths:
        document_id = document_id_for(source_file)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        conversion_dir = self.data_dir / document_id / "conversion" / f"{timestamp}_{conversion_id}"
        work_dir = conversion_dir / "output"
        work_dir.mkdir(parents=True, exist_ok=True)
        return ConversionPaths(
            document_id=document_id,
            conversion_id=conversion_id,
            conversion_dir=conversion_dir,
            upload_file=conversion_dir / f"{document_id}.pdf",
            work_dir=work_dir,
            result_file=conversion_dir / f"{conversion_id}.json",
        )

    def save_upload(self, paths: ConversionPaths, data: bytes) -> Path:
        paths.upload_file.write_bytes(data)
        return paths.upload_file

    def save(self, paths: ConversionPaths, result: ConversionResult) -> Path:
        result.save(str(paths.result_file))
        return paths.result_file

    def find(self, conversion_id: str) -> Optional[Path]:
        if not _is_safe_id(conversion_id) or not self.data_dir.exists():
            return None
        matches = sorted(self.data_dir.glob(f"*/conversion/*_{conversion_id}/{conversion_id}.json"))
        return matches[-1] if matches else None

    def load(self, conversion_id: str) -> Optional[ConversionResult]:
        path = self.find(conversion_id)
        if path is None:
            return None
        return ConversionResult.load(str(path))

    def delete(self, conversion_id: str) -> bool:
        path = self.find(conversion_id)
        if path is None:
            return False
        shutil.rmtree(path.parent, ignore_errors=True)
        return True


def _is_safe_id(conversion_id: str) -> bool:
    return bool(conversion_id) and _UNSAFE_CHARS.search(conversion_id) is None and ".." not in conversion_id

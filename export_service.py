import json
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from catalog_models import CatalogDocument


class CatalogExportError(OSError):
    pass


def _default_file_mode() -> int:
    # mkstemp creates 0600 files; written documents follow the umask like a plain open() would.
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def serialize_catalog(document: CatalogDocument) -> str:
    return json.dumps(document.model_dump(mode="json"), indent=2, ensure_ascii=False) + "\n"


def write_text_atomic(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` via a sibling temp file and ``os.replace``.

    Parent directories are created. On failure the temp file is removed and
    the previous contents of ``path`` (if any) are left untouched.
    """
    payload = text.encode("utf-8")
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(payload)
            fh.flush()
            os.fsync(fh.fileno())
        os.chmod(tmp_name, _default_file_mode())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def write_catalog(document: CatalogDocument, path: Path) -> Path:
    text = serialize_catalog(document)
    try:
        write_text_atomic(path, text)
    except OSError as exc:
        raise CatalogExportError(f"Failed to write catalog to {path}: {exc}") from exc
    return path


def read_catalog(path: Path) -> CatalogDocument:
    try:
        return CatalogDocument.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as exc:
        raise ValueError(f"Invalid catalog document in {path}: {exc}") from exc

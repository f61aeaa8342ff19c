import re
from uuid import UUID


class KeyGenerator:
    @staticmethod
    def _safe_filename(filename: str) -> str:
        # Simple sanitization
        return re.sub(r"[^a-zA-Z0-9_.-]", "_", filename) or "upload.bin"

    @staticmethod
    def announcement_file_key(department: str, asset_id: UUID, filename: str) -> str:
        safe_department = KeyGenerator._safe_filename(department)
        safe_filename = KeyGenerator._safe_filename(filename)
        return f"departments/{safe_department}/announcements/{asset_id}/{safe_filename}"
